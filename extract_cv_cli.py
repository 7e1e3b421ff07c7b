"""extract_cv_cli.py
Run CVExtractionFramework from the command line.
Example: `python extract_cv_cli.py path/to/cv.pdf --requester user-1`
"""
import argparse
import json
import os
import sys
from dataclasses import asdict

from cv_autofill.exceptions import ExtractionError
from cv_autofill.parse_classes.cv_extraction_framework import CVExtractionFramework


def main():
    parser = argparse.ArgumentParser(
        description="Extract a structured candidate profile draft from a CV file."
    )
    parser.add_argument("file_path", help="Path to the CV (.pdf, .docx, .txt or an image)")
    parser.add_argument(
        "--requester",
        default="cli",
        help="Requester id used to scope cached results (default: cli)"
    )
    args = parser.parse_args()

    with open(args.file_path, "rb") as f:
        document_bytes = f.read()

    # Declared format comes from the extension
    file_name = os.path.basename(args.file_path)
    declared_format = os.path.splitext(file_name)[1]

    # Initialize the framework
    framework = CVExtractionFramework()

    try:
        result = framework.process_document(
            document_bytes,
            declared_format=declared_format,
            requester_id=args.requester,
            file_name=file_name,
        )
    except ExtractionError as e:
        print(f"Extraction failed: {e}", file=sys.stderr)
        sys.exit(1)

    # Print the results
    print(json.dumps(asdict(result), indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
