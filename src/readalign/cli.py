"""Command line entry point: align one query against one reference and print the result."""
import argparse
import sys
from typing import Optional, Sequence

from readalign.core.seq import SeqError
from readalign.align.local import LocalScoring, local_score
from readalign.align.scoring import Scoring
from readalign.align.semiglobal import SemiglobalAligner, TracebackError
from readalign.io.render import format_alignment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='readalign',
        description='Semi-global alignment of a query (read) against a reference, '
                    'with affine gaps and optional soft clipping.'
    )
    parser.add_argument('reference', help='Reference sequence')
    parser.add_argument('query', help='Query sequence, aligned or clipped in full')
    scoring = parser.add_argument_group('scoring')
    scoring.add_argument('--gap-init', dest='gap_init', type=int, help='Score charged once per gap run (default: -5)')
    scoring.add_argument('--gap-unit', dest='gap_unit', type=int, help='Score charged per gapped position (default: -1)')
    scoring.add_argument('--match', type=int, help='Score for identical symbols (default: 1, or 2 with --local)')
    scoring.add_argument('--mismatch', type=int, help='Score for differing symbols (default: -1)')
    scoring.add_argument('--soft-clip', dest='soft_clip', type=int,
                         help='Score for clipping a query prefix or suffix (default: clipping disabled)')
    scoring.add_argument('--indel', type=int, help='Score per gapped symbol in --local mode (default: -1)')
    parser.add_argument('--cigar', action='store_true', help='Print only the CIGAR string')
    parser.add_argument('--local', action='store_true',
                        help='Report the best local (Smith-Waterman) score and its end position instead')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.local: return _main_local(args)
    aligner = SemiglobalAligner(Scoring.from_obj(args))
    try:
        alignment = aligner.align(args.reference, args.query)
    except (SeqError, TracebackError) as e:
        print(f'readalign: error: {e}', file=sys.stderr)
        return 1
    print(alignment.cigar.decode('ascii') if args.cigar else format_alignment(alignment, args.reference, args.query))
    return 0


def _main_local(args) -> int:
    try:
        score, (s_end, t_end) = local_score(args.reference, args.query, LocalScoring.from_obj(args))
    except SeqError as e:
        print(f'readalign: error: {e}', file=sys.stderr)
        return 1
    print(f'score={score} s_end={s_end} t_end={t_end}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
