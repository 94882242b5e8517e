#!/usr/bin/env python3
"""
Study assistant command line: outline a PDF, generate an interactive lesson,
summarize a chapter or ask a question about the document.
Results are printed as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from config import MODEL_NAMES, create_model
from study_processor.core.processor import StudyProcessor
from study_processor.content.models import Chapter, PageText
from study_processor.utils.exceptions import StudyProcessorError
from study_processor.utils.logging import get_logger, setup_file_logging

logger = get_logger(__name__)


def print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def select_chapter(chapters: List[Chapter], number: int) -> Optional[Chapter]:
    """Return the 1-based chapter, printing an error when out of range."""
    if number < 1 or number > len(chapters):
        print(f"Error: chapter {number} not found (document has {len(chapters)} chapter(s))", file=sys.stderr)
        return None
    return chapters[number - 1]


def run_outline(processor: StudyProcessor, pages: List[PageText], args) -> int:
    chapters = processor.analyze_structure(pages)
    if args.chapter is not None:
        chapter = select_chapter(chapters, args.chapter)
        if chapter is None:
            return 1
        targets = [chapter]
    else:
        targets = chapters
    if args.lessons:
        for chapter in targets:
            processor.expand_chapter(chapter, pages)
    print_json([chapter.to_dict() for chapter in targets])
    return 0


def run_lesson(processor: StudyProcessor, pages: List[PageText], args) -> int:
    chapter = select_chapter(processor.analyze_structure(pages), args.chapter)
    if chapter is None:
        return 1

    section = chapter
    if args.lesson is not None:
        lessons = processor.expand_chapter(chapter, pages)
        if args.lesson < 1 or args.lesson > len(lessons):
            print(f"Error: lesson {args.lesson} not found in '{chapter.title}'", file=sys.stderr)
            return 1
        section = lessons[args.lesson - 1]

    content = processor.start_lesson(section, pages)
    if content is None:
        print(f"Error: could not generate a lesson for '{section.title}'", file=sys.stderr)
        return 1
    if args.questions and processor.add_initial_questions(content) is None:
        print("Warning: question generation failed", file=sys.stderr)
    print_json(content.to_dict())
    return 0


def run_summarize(processor: StudyProcessor, pages: List[PageText], args) -> int:
    chapter = select_chapter(processor.analyze_structure(pages), args.chapter)
    if chapter is None:
        return 1
    summary = processor.summarize_section(chapter, pages, args.style)
    if summary is None:
        print(f"Error: could not summarize '{chapter.title}'", file=sys.stderr)
        return 1
    print_json({"chapter": chapter.title, "summary": summary})
    return 0


def run_ask(processor: StudyProcessor, pages: List[PageText], args) -> int:
    result = processor.ask_document(pages, args.query)
    if result is None:
        print("Error: no answer could be produced", file=sys.stderr)
        return 1
    print_json(result.to_dict())
    return 0


COMMANDS = {
    "outline": run_outline,
    "lesson": run_lesson,
    "summarize": run_summarize,
    "ask": run_ask,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Study assistant for PDF documents")
    parser.add_argument("--model", choices=sorted(MODEL_NAMES), default=None,
                        help="Gemini model (default: GEMINI_MODEL setting)")
    parser.add_argument("--log-file", action="store_true", help="Also write logs to the logs/ directory")
    subparsers = parser.add_subparsers(dest="command", required=True)

    outline = subparsers.add_parser("outline", help="Show the chapter outline")
    outline.add_argument("pdf", help="PDF file")
    outline.add_argument("--lessons", action="store_true", help="Split chapters into lessons")
    outline.add_argument("--chapter", type=int, default=None, help="Only this chapter (1-based)")

    lesson = subparsers.add_parser("lesson", help="Generate an interactive lesson")
    lesson.add_argument("pdf", help="PDF file")
    lesson.add_argument("--chapter", type=int, required=True, help="Chapter number (1-based)")
    lesson.add_argument("--lesson", type=int, default=None, help="Lesson number inside the chapter (1-based)")
    lesson.add_argument("--questions", action="store_true", help="Add the initial question batch")

    summarize = subparsers.add_parser("summarize", help="Summarize a chapter")
    summarize.add_argument("pdf", help="PDF file")
    summarize.add_argument("--chapter", type=int, required=True, help="Chapter number (1-based)")
    summarize.add_argument("--style", default=None, help="Summary style, e.g. 'bullet points'")

    ask = subparsers.add_parser("ask", help="Answer a question from the document")
    ask.add_argument("pdf", help="PDF file")
    ask.add_argument("query", help="Question to answer")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_file:
        log_path = setup_file_logging()
        logger.info(f"Logging to {log_path}")

    pdf_path = Path(args.pdf)
    if pdf_path.suffix.lower() != ".pdf":
        print(f"Error: not a PDF file: {pdf_path.name}", file=sys.stderr)
        return 1

    try:
        processor = StudyProcessor(model=create_model(args.model))
        pages = processor.load_document(str(pdf_path))
        if not pages:
            print(f"Error: {pdf_path.name} has no pages", file=sys.stderr)
            return 1
        return COMMANDS[args.command](processor, pages, args)
    except StudyProcessorError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
