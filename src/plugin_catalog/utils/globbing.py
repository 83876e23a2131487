"""Glob matching for archive entry names."""

import fnmatch

from plugin_catalog.exceptions import InvalidPatternError

RECURSIVE_WILDCARD = "**"


def validate_pattern(pattern: str) -> None:
    """
    Check that every segment of a glob pattern is well formed.

    Raises:
        InvalidPatternError: On an empty pattern or an unterminated '[' class
    """
    if not pattern:
        raise InvalidPatternError(pattern, "pattern is empty")

    for segment in pattern.split("/"):
        index = 0
        while index < len(segment):
            char = segment[index]
            if char == "\\":
                index += 2
                continue
            if char == "[":
                end = index + 1
                if end < len(segment) and segment[end] in "!^":
                    end += 1
                # a ']' right after the opening is a literal member
                if end < len(segment) and segment[end] == "]":
                    end += 1
                end = segment.find("]", end)
                if end == -1:
                    raise InvalidPatternError(pattern, "unterminated character class")
                index = end + 1
                continue
            index += 1


def _match_segments(pattern_parts: list[str], path_parts: list[str]) -> bool:
    if not pattern_parts:
        return not path_parts

    head = pattern_parts[0]
    if head == RECURSIVE_WILDCARD:
        # '**' consumes zero or more whole segments
        for skip in range(len(path_parts) + 1):
            if _match_segments(pattern_parts[1:], path_parts[skip:]):
                return True
        return False

    if not path_parts:
        return False
    if not fnmatch.fnmatchcase(path_parts[0], head):
        return False
    return _match_segments(pattern_parts[1:], path_parts[1:])


def match_path(pattern: str, path: str) -> bool:
    """
    Match a '/'-separated path against a glob pattern.

    '*', '?' and '[...]' match within a single segment and never cross '/'.
    A segment consisting of '**' matches zero or more whole segments.

    Examples:
        >>> match_path("**/plugins/*/*.yaml", "plugins/docker/plugin.yaml")
        True
        >>> match_path("**/plugins/*/*.yaml", "a/b/plugins/docker/plugin.yaml")
        True
        >>> match_path("**/plugins/*/*.yaml", "plugins/docker/x/plugin.yaml")
        False

    Raises:
        InvalidPatternError: If the pattern is malformed
    """
    validate_pattern(pattern)
    return _match_segments(pattern.split("/"), path.split("/"))
