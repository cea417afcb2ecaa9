"""
Command-line interface for trivia-quiz

Plays the quiz in the terminal and offers a few housekeeping commands
for the question bank and saved progress.
"""

import asyncio
import sys
import argparse
import json
import logging
import random
from typing import Callable, List, Optional

from .checkpoint import CheckpointStore
from .config import Config, config
from .errors import AnswerNotFoundError, ConfigError, LoadError, SessionError, ValidationError
from .loader import QuestionStore
from .quiz.schema import LETTERS, QuizMode, SessionStats
from .quiz.evaluator import option_text, validate_question
from .session import (
    QuizSession,
    SessionStatus,
    Submitted,
    FreeTextSubmitted,
    SelfAssessed,
    Advanced,
    ModeToggled,
    Restarted,
)
from .storage import get_storage, MemoryStorage


GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
DIM = "\033[2m"
RESET = "\033[0m"

HELP_TEXT = (
    "Commands: :mode (switch answer mode)  :restart  :stats  :quit"
)


def saves_to_disk(no_save: bool = False, settings: Optional[Config] = None) -> bool:
    """Whether progress outlives the process."""
    settings = settings or config
    return (
        not no_save
        and settings.checkpoint.enabled
        and settings.checkpoint.backend != "memory"
    )


def build_checkpoints(
    no_save: bool = False,
    directory: Optional[str] = None,
    settings: Optional[Config] = None,
) -> CheckpointStore:
    """Checkpoint store for the configured (or overridden) backend."""
    settings = settings or config
    if not saves_to_disk(no_save, settings):
        return CheckpointStore(MemoryStorage(), key=settings.checkpoint.storage_key)
    return CheckpointStore(
        get_storage("file", directory=directory or settings.checkpoint.directory),
        key=settings.checkpoint.storage_key,
    )


def format_stats(stats: SessionStats) -> str:
    """One-line stats summary."""
    return (
        f"Attempted: {stats.attempted} | Correct: {stats.correct} | "
        f"Accuracy: {stats.accuracy}%"
    )


def format_question(session: QuizSession) -> str:
    """Render the current question for the terminal."""
    question = session.current_question
    number, total = session.progress
    mode = "multiple choice" if session.mode == QuizMode.MULTIPLE_CHOICE else "free text"

    lines = [
        "",
        f"Question {number} of {total}  {DIM}[{mode}]{RESET}",
        f"{DIM}{question.category} - {question.difficulty}{RESET}",
    ]
    if question.context:
        lines.append(question.context)
    lines.append("")
    lines.append(question.question)

    if session.mode == QuizMode.MULTIPLE_CHOICE:
        lines.append("")
        for letter, alternative in zip(LETTERS, question.alternatives):
            lines.append(f"  {letter.value}) {alternative}")

    return "\n".join(lines)


def format_feedback(session: QuizSession) -> str:
    """Render feedback for the answered question."""
    feedback = session.feedback
    answer = f"{feedback.correct_letter.value}) {feedback.correct_text}"

    if feedback.is_correct:
        lines = [f"{GREEN}🎉 Correct!{RESET}"]
        if feedback.user_answer is not None:
            lines.append(f'Your answer "{feedback.user_answer}" is correct!')
        lines.append(f"The correct answer is: {answer}")
    else:
        lines = [f"{RED}❌ Incorrect{RESET}"]
        if feedback.selected_letter is not None:
            lines.append(f"You selected: {feedback.selected_letter.value})")
        if feedback.user_answer is not None:
            lines.append(f'Your answer: "{feedback.user_answer}"')
        lines.append(f"The correct answer is: {answer}")

    lines.append(format_stats(session.stats))
    return "\n".join(lines)


def run_session(
    session: QuizSession,
    read: Optional[Callable[[str], str]] = None,
    write: Optional[Callable[[str], None]] = None,
    saving: bool = True,
) -> QuizSession:
    """
    Drive a started session from line-based input until it ends.

    Returns when the quiz is complete or the user quits. Input is read
    through `read(prompt)` so tests can feed scripted answers. Questions
    whose answer matches no alternative are reported and skipped.
    `saving` only changes what the user is told on quit.
    """
    read = read or input
    write = write or print
    farewell = "Progress saved." if saving else "Progress not saved."

    if session.restored_from_checkpoint:
        write(f"{YELLOW}Restored from checkpoint.{RESET} {format_stats(session.stats)}")
    write(HELP_TEXT)

    while not session.is_complete:
        if session.status == SessionStatus.IN_QUESTION:
            write(format_question(session))
            if session.mode == QuizMode.MULTIPLE_CHOICE:
                last = LETTERS[len(session.current_question.alternatives) - 1]
                prompt = f"Your answer (A-{last.value}): "
            else:
                prompt = "Your answer: "
        elif session.status == SessionStatus.AWAITING_SELF_ASSESSMENT:
            question = session.current_question
            write(f'You answered: "{session.pending_answer}"')
            write(
                f"The correct answer is: {session.pending_letter.value}) "
                f"{option_text(question, session.pending_letter)}"
            )
            prompt = "Were you correct? [y/n]: "
        else:
            prompt = "Press Enter for the next question: "

        try:
            line = read(prompt).strip()
        except EOFError:
            write("")
            return session

        if line.startswith(":"):
            command = line[1:].lower()
            if command in ("q", "quit", "exit"):
                write(f"{farewell} See you next time!")
                return session
            if command in ("m", "mode"):
                session.dispatch(ModeToggled())
            elif command in ("r", "restart"):
                session.dispatch(Restarted())
                write("Quiz restarted with a fresh shuffle.")
            elif command in ("s", "stats"):
                write(format_stats(session.stats))
            else:
                write(HELP_TEXT)
            continue

        try:
            if session.status == SessionStatus.IN_QUESTION:
                if session.mode == QuizMode.MULTIPLE_CHOICE:
                    session.dispatch(Submitted(line))
                else:
                    session.dispatch(FreeTextSubmitted(line))
                if session.status == SessionStatus.ANSWERED:
                    write(format_feedback(session))
            elif session.status == SessionStatus.AWAITING_SELF_ASSESSMENT:
                verdict = line.lower()
                if verdict in ("y", "yes"):
                    session.dispatch(SelfAssessed(True))
                elif verdict in ("n", "no"):
                    session.dispatch(SelfAssessed(False))
                else:
                    write("Please answer y or n.")
                    continue
                write(format_feedback(session))
            else:
                session.dispatch(Advanced())
        except ValidationError as e:
            write(f"{YELLOW}{e}{RESET}")
        except AnswerNotFoundError as e:
            write(f"{RED}⚠️  Question data error:{RESET} {e}")
            write("Skipping this question.")
            session.skip_current()

    _, total = session.progress
    write("")
    write(f"🎊 Quiz Complete! You've answered all {total} questions.")
    write(format_stats(session.stats))
    return session


def cmd_play(args) -> int:
    """Play the quiz interactively."""
    checkpoints = build_checkpoints(args.no_save, args.checkpoint_dir)
    if args.restart:
        checkpoints.clear()

    mode = QuizMode.FREE_TEXT if args.text_mode else None
    session = QuizSession(
        checkpoints=checkpoints,
        rng=random.Random(args.seed) if args.seed is not None else None,
        fuzzy_grading=True if args.fuzzy else None,
        mode=mode,
    )
    store = QuestionStore(args.source)

    print("Loading questions...")
    try:
        asyncio.run(session.start(store))
    except LoadError as e:
        print(f"{RED}⚠️  Error:{RESET} {e}", file=sys.stderr)
        print("Failed to load quiz questions. Please try again.", file=sys.stderr)
        return 1

    if session.restored_from_checkpoint and mode is not None and session.mode != mode:
        session.toggle_mode()

    saving = saves_to_disk(args.no_save)
    try:
        run_session(session, saving=saving)
    except KeyboardInterrupt:
        print("\nProgress saved." if saving else "\nProgress not saved.")
    return 0


def cmd_validate(args) -> int:
    """Check every question's answer matches one of its alternatives."""
    store = QuestionStore(args.source)
    try:
        questions = asyncio.run(store.load())
    except LoadError as e:
        print(f"{RED}⚠️  Error:{RESET} {e}", file=sys.stderr)
        return 1

    problems = []
    for index, question in enumerate(questions):
        try:
            validate_question(question)
        except AnswerNotFoundError as e:
            problems.append({"index": index, "question": question.question, "error": str(e)})

    if args.json:
        print(json.dumps({
            "source": store.source,
            "questions": len(questions),
            "problems": problems,
        }, indent=2))
    else:
        print(f"Loaded {len(questions)} questions from {store.source}")
        if problems:
            print(f"{RED}{len(problems)} question(s) have no matching answer:{RESET}")
            for problem in problems:
                print(f"  #{problem['index'] + 1}: {problem['question']}")
                print(f"      {problem['error']}")
        else:
            print(f"{GREEN}✓ All answers match an alternative{RESET}")

    return 1 if problems else 0


def cmd_status(args) -> int:
    """Show saved progress, if any."""
    checkpoint = build_checkpoints(directory=args.checkpoint_dir).load()
    if checkpoint is None:
        if args.json:
            print(json.dumps({"checkpoint": None}, indent=2))
        else:
            print("No saved progress.")
        return 0

    stats = SessionStats(attempted=checkpoint.attempted, correct=checkpoint.correct)
    total = len(checkpoint.ordered_questions)

    if args.json:
        print(json.dumps({
            "checkpoint": {
                "position": checkpoint.position,
                "total": total,
                "mode": checkpoint.mode.value,
                "saved_at": checkpoint.saved_at,
                "stats": stats.to_dict(),
            },
        }, indent=2))
        return 0

    number = min(checkpoint.position + 1, total)
    print(f"Saved progress: question {number} of {total} ({checkpoint.mode.value})")
    print(format_stats(stats))
    if checkpoint.saved_at:
        print(f"Saved at: {checkpoint.saved_at}")
    return 0


def cmd_reset(args) -> int:
    """Delete saved progress."""
    if build_checkpoints(directory=args.checkpoint_dir).clear():
        print("Saved progress cleared.")
        return 0
    print("Could not clear saved progress.", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trivia-quiz",
        description="Multiple-choice and free-text trivia with saved progress",
        epilog="Example: trivia-quiz play quiz_questions.json --text-mode"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play the quiz")
    play_parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help=f"Question JSON file or URL (default: {config.source.questions_source})"
    )
    play_parser.add_argument(
        "--text-mode",
        action="store_true",
        help="Answer in free text instead of picking A-D"
    )
    play_parser.add_argument(
        "--fuzzy",
        action="store_true",
        help="Grade free-text answers automatically instead of self-assessment"
    )
    play_parser.add_argument(
        "--restart",
        action="store_true",
        help="Ignore saved progress and start over"
    )
    play_parser.add_argument(
        "--no-save",
        action="store_true",
        help="Don't read or write saved progress"
    )
    play_parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible question order"
    )
    play_parser.add_argument(
        "--checkpoint-dir",
        help=f"Where progress is saved (default: {config.checkpoint.directory})"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check a question bank")
    validate_parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Question JSON file or URL"
    )
    validate_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )

    # Status command
    status_parser = subparsers.add_parser("status", help="Show saved progress")
    status_parser.add_argument("--checkpoint-dir", help="Where progress is saved")
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )

    # Reset command
    reset_parser = subparsers.add_parser("reset", help="Delete saved progress")
    reset_parser.add_argument("--checkpoint-dir", help="Where progress is saved")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "play": cmd_play,
        "validate": cmd_validate,
        "status": cmd_status,
        "reset": cmd_reset,
    }
    try:
        return commands[args.command](args)
    except (SessionError, ConfigError) as e:
        print(f"{RED}⚠️  Error:{RESET} {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
