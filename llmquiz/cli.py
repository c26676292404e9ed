"""
Generate a quiz from a local report.

Usage:
  llmquiz-generate report.pdf --course 3 --section 1
  llmquiz-generate notes.txt --course 3 --section 1 --name "Week 2 quiz"
  llmquiz-generate report.pdf --course 3 --section 1 --dry-run   # parse only, nothing saved

.pdf files go through text extraction; any other file is read as UTF-8 text.
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from llmquiz.config import load_settings
from llmquiz.database.database import Base, SessionLocal, engine
from llmquiz.database import models  # noqa: F401
from llmquiz.database.repository import SqlQuizRepository
from llmquiz.errors import QuizGenerationError
from llmquiz.generation import CoursePosition, QuestionGenerator, QuizBuilder, QuizPipeline, parse_questions
from llmquiz.ingestion import PdfTextExtractor


def _read_source(path: Path) -> str:
    if path.suffix.lower() == ".pdf":
        return PdfTextExtractor().extract(path.read_bytes())
    return path.read_text(encoding="utf-8")


def _print_questions(questions) -> None:
    for i, q in enumerate(questions, start=1):
        flag = "  [FORMAT ERROR]" if q.format_error else ""
        print(f"{i}. {q.text}{flag}")
        for key, text in q.options.items():
            mark = " (ok)" if key == q.correct_key else ""
            print(f"   {key}) {text}{mark}")
        print()


def main(argv=None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")

    parser = argparse.ArgumentParser(
        description="Generate a multiple-choice quiz from a report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("source", type=Path, help="PDF report or UTF-8 text file")
    parser.add_argument("--course", type=int, required=True, help="Course id")
    parser.add_argument("--section", type=int, required=True, help="Course section id")
    parser.add_argument("--sequence", type=int, default=0, help="Ordering within the section")
    parser.add_argument("--name", help="Quiz name (default: 'LLM Quiz - <file name>')")
    parser.add_argument("--user", type=int, help="Requesting user id, stored in the history")
    parser.add_argument("--dry-run", action="store_true", help="Generate and print questions without saving")

    args = parser.parse_args(argv)

    if not args.source.exists():
        print(f"File not found: {args.source}")
        return 1

    try:
        generator = QuestionGenerator(load_settings())
        generator.ensure_credential()
        text = _read_source(args.source)

        if args.dry_run:
            _print_questions(parse_questions(generator.generate(text)))
            return 0

        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            pipeline = QuizPipeline(generator=generator, builder=QuizBuilder(SqlQuizRepository(db)))
            position = CoursePosition(course_id=args.course, section_id=args.section, sequence=args.sequence)
            result = pipeline.run_from_text(
                text, position, source_name=args.source.name, name=args.name, user_id=args.user,
            )
        finally:
            db.close()
    except (QuizGenerationError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    _print_questions(result.questions)
    print(f"Quiz '{result.quiz_name}' saved: quiz_id={result.handle.quiz_id}, "
          f"{result.handle.item_count} item(s), {result.format_error_count} format error(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
