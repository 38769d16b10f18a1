"""
Visibility mapping from a source gist to a target snippet.
"""

from ...core.domain.enums import Visibility, VisibilityMode


def map_visibility(is_public: bool, mode: VisibilityMode | str) -> Visibility:
    """
    Decide the visibility of the mirrored snippet.

    Args:
        is_public: Whether the source gist is public.
        mode: Target visibility mode; unknown strings behave like preserve.

    Returns:
        The concrete visibility to request from the target.
    """
    if not isinstance(mode, VisibilityMode):
        mode = VisibilityMode.from_string(mode)

    if mode is VisibilityMode.PUBLIC:
        return Visibility.PUBLIC
    if mode is VisibilityMode.PRIVATE:
        return Visibility.PRIVATE
    if mode is VisibilityMode.INTERNAL:
        return Visibility.INTERNAL
    return Visibility.PUBLIC if is_public else Visibility.PRIVATE
