"""@-mention lookup over the cached project trees."""

from workspacekit.mentions.index import MentionIndex, build_mention_files, filter_mentions
from workspacekit.mentions.picker import MentionEdit, MentionPicker, detect_mention_query

__all__ = [
    "MentionEdit",
    "MentionIndex",
    "MentionPicker",
    "build_mention_files",
    "detect_mention_query",
    "filter_mentions",
]
