"""Coverage judgement: summarizing and threshold checking."""

from .check import check
from .summarize import Summarizer, summarize_files, summarize_global

__all__ = ["Summarizer", "check", "summarize_files", "summarize_global"]
