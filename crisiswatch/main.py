"""Interactive command line client for checking claims."""

import asyncio
import logging
from typing import Optional

from .domain.errors import InvalidClaimError, TransportError
from .domain.models.example_claim import DEMO_EXAMPLES
from .domain.models.presentation import share_text, verdict_label
from .domain.models.progress import ProgressSnapshot
from .domain.services.verification_orchestrator import VerificationOrchestrator, VerificationOutcome
from .infrastructure.dependencies import ServiceContainer

logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

HELP = """Commands:
  <claim text>   check a claim
  retry          check the last claim again
  history        list recent checks
  again <n>      re-check history entry n
  clear          clear history (next checks bypass the cache)
  cache on|off   use or bypass the backend cache for new checks
  examples       list example claims
  example <n>    check example n
  share          print share text for the last result
  badges         show your badges
  quit           exit"""


class ProgressPrinter:
    """Prints progress lines whenever the stage or message changes."""

    def __init__(self):
        self._last = None

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        key = (snapshot.stage_index, snapshot.message, snapshot.is_settled)
        if key == self._last or not (snapshot.is_running or snapshot.is_settled):
            return
        self._last = key
        line = f"  [{snapshot.stage_index + 1}/4] {snapshot.description}"
        if snapshot.message:
            line += f" - {snapshot.message}"
        print(f"{line} ({snapshot.elapsed_seconds}s)")


def print_outcome(outcome: VerificationOutcome) -> None:
    result = outcome.result
    print(f"\n{verdict_label(result.verdict)}  ({result.verdict.label})")
    print(f"Confidence: {result.confidence}%")
    print(f"Sources checked: {result.sources_checked}  Time: {result.time_display}")
    print(f"Via: {outcome.transport.value}")
    if result.explanation:
        print(f"\nExplanation: {result.explanation}")
    if result.correction:
        print(f"Correction: {result.correction}")
    if result.evidence:
        print("\nEvidence:")
        for i, item in enumerate(result.evidence, 1):
            band = f" [{item.reliability_band}]" if item.reliability_band else ""
            print(f"{i}. {item.source}{band}: {item.snippet}")


async def run_command(
    command: str,
    container: ServiceContainer,
    orchestrator: VerificationOrchestrator,
) -> Optional[VerificationOutcome]:
    """Execute one CLI command. Returns the outcome if a check ran."""
    history = container.get_history_service()
    gamification = container.get_gamification_service()
    language = container.config.language
    name, _, argument = command.partition(" ")
    name = name.lower()

    if name == "help":
        print(HELP)
    elif name == "retry":
        return await orchestrator.retry()
    elif name == "history":
        if not history.entries:
            print("No checks yet.")
        for i, entry in enumerate(history.entries, 1):
            print(f"{i}. [{verdict_label(entry.verdict)} {entry.confidence}%] {entry.claim}")
    elif name == "again":
        entries = history.entries
        index = int(argument) - 1
        if not 0 <= index < len(entries):
            print(f"No history entry {argument}")
            return None
        return await orchestrator.verify_history_entry(entries[index].id)
    elif name == "clear":
        history.clear()
        print("History cleared.")
    elif name == "cache":
        choice = argument.strip().lower()
        if choice in ("on", "off"):
            history.set_skip_cache(choice == "off")
        state = "bypassed" if history.skip_cache else "used"
        print(f"Backend cache is {state} for new checks.")
    elif name == "examples":
        for example in DEMO_EXAMPLES:
            print(f"{example.id}. {example.claim}")
    elif name == "example":
        example = next((e for e in DEMO_EXAMPLES if str(e.id) == argument.strip()), None)
        if example is None:
            print(f"No example {argument}")
            return None
        return await orchestrator.verify_example(example, language)
    elif name == "share":
        if orchestrator.last_outcome is None:
            print("Nothing to share yet.")
        else:
            print(share_text(orchestrator.last_outcome.result))
    elif name == "badges":
        state = gamification.state
        print(f"Claims checked: {state.claims_checked}  Streak: {state.streak}  Fact score: {state.fact_score}")
        for badge in gamification.unlocked_badges():
            print(f"{badge.icon} {badge.name} - {badge.description}")
        upcoming = gamification.next_badge()
        if upcoming is not None:
            print(f"Next: {upcoming.icon} {upcoming.name} ({gamification.progress():.0f}%)")
    else:
        return await orchestrator.verify(command, language)
    return None


async def main():
    """Run the interactive client."""
    print("CrisisWatch - is it cap or facts?")
    print("---------------------------------")
    print("Type 'help' for commands.")

    container = ServiceContainer(progress_listener=ProgressPrinter())
    orchestrator = await container.initialize()
    if orchestrator.connectivity.is_unreachable:
        print("(offline mode: results are simulated)")

    try:
        while True:
            command = input("\nEnter a claim or command (or 'quit' to exit): ").strip()
            if command.lower() in ('quit', 'exit', 'q'):
                break
            if not command:
                continue

            badges_before = set(container.get_gamification_service().state.unlocked_badges)
            try:
                outcome = await run_command(command, container, orchestrator)
            except (InvalidClaimError, KeyError, ValueError) as e:
                print(f"\n{e}")
                continue
            except TransportError as e:
                print(f"\nError checking claim: {e}")
                print("Type 'retry' to try again.")
                continue

            if outcome is not None:
                print_outcome(outcome)
                for badge in container.get_gamification_service().unlocked_badges():
                    if badge.id not in badges_before:
                        print(f"\n🎉 Badge unlocked: {badge.icon} {badge.name}")

    finally:
        # Clean up
        await container.shutdown()


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
