"""
Preview page - Wrap a preview fragment into a standalone HTML document.

The result is handed to ``streamlit.components.v1.html``, which shows it in
its own iframe.
"""

from pagelab.sandbox import MOUNT_ID, PAGE_SHELL, PreviewFragment


_EMPTY_MOUNT = f'<main id="{MOUNT_ID}"></main>'


def build_preview_page(fragment: PreviewFragment) -> str:
    """Insert the fragment's markup (unparsed) into the page shell."""
    return PAGE_SHELL.replace(_EMPTY_MOUNT, f'<main id="{MOUNT_ID}">{fragment.to_html()}</main>', 1)


def estimate_preview_height(fragment: PreviewFragment, minimum: int = 160, maximum: int = 640) -> int:
    """Rough iframe height from the number of lines in the fragment."""
    lines = fragment.to_html().count("\n") + fragment.to_html().count("<") // 2 + 1
    return max(minimum, min(maximum, 40 + lines * 22))
