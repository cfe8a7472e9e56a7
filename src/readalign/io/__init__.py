"""
Text output for alignments.
"""
from readalign.io.render import render, format_alignment
