"""Three-line text rendering of alignments."""
from typing import Any

from readalign.core.seq import Seq
from readalign.align.alignment import Alignment
from readalign.align.moves import Move


# Constants ------------------------------------------------------------------------------------------------------------
GAP = '-'
CLIP = '~'
_MARKERS = {Move.MATCH: '|', Move.SUBSTITUTE: '\\', Move.INSERT: '+', Move.DELETE: 'x'}


# Functions ------------------------------------------------------------------------------------------------------------
def render(alignment: Alignment, s: Any, t: Any) -> tuple[str, str, str]:
    """
    Renders an alignment as reference, marker and query rows of equal width.

    Matches are marked ``|``, substitutions ``\\``, reference symbols facing a query gap
    ``+`` and query symbols facing a reference gap ``x``. Clipped query symbols are shown
    in lower case under a ``~`` marker.

    Args:
        alignment: The alignment to draw.
        s: The reference sequence it was computed from.
        t: The query sequence it was computed from.

    Returns:
        The three rows as strings.

    Examples:
        >>> render(compute('GGTAGGG', 'GGGGG', Scoring(mismatch=-3)), 'GGTAGGG', 'GGGGG')
        ('GGTAGGG', '||++|||', 'GG--GGG')
    """
    ref, query = str(Seq.coerce(s)), str(Seq.coerce(t))
    top, middle, bottom = [], [], []
    i, j = alignment.s_range[0], alignment.t_range[0]
    for mv in alignment.moves:
        if mv.is_clip:
            width = alignment.prefix_clip_length if mv is Move.PREFIX_CLIP else alignment.suffix_clip_length
            top.append(GAP * width); middle.append(CLIP * width); bottom.append(query[j:j + width].lower())
            j += width
            continue
        top.append(ref[i] if mv.consumes_reference else GAP)
        bottom.append(query[j] if mv.consumes_query else GAP)
        middle.append(_MARKERS[mv])
        i += mv.consumes_reference
        j += mv.consumes_query
    return ''.join(top), ''.join(middle), ''.join(bottom)


def format_alignment(alignment: Alignment, s: Any, t: Any) -> str:
    """
    Formats an alignment as a short header followed by its three rendered rows.

    Examples:
        >>> print(format_alignment(aln, s, t))
        score=-2 s_range=[0,7) t_range=[0,5) cigar=2=2D3=
        GGTAGGG
        ||++|||
        GG--GGG
    """
    (s_start, s_end), (t_start, t_end) = alignment.s_range, alignment.t_range
    header = (f"score={alignment.score} s_range=[{s_start},{s_end}) t_range=[{t_start},{t_end}) "
              f"cigar={alignment.cigar.decode('ascii')}")
    return '\n'.join((header, *render(alignment, s, t)))
