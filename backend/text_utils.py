"""Text preparation for speech synthesis"""

import re


_BOLD = re.compile(r'\*\*(.*?)\*\*')
_ITALIC = re.compile(r'\*(.*?)\*')
_CODE = re.compile(r'`(.*?)`')
_HEADING = re.compile(r'#{1,6}\s+')
_WHITESPACE = re.compile(r'\s+')
_UNSPEAKABLE = re.compile(r'[^\w\s.,!?;:-]')


def _sanitize_once(text: str) -> str:
    text = _BOLD.sub(r'\1', text)
    text = _ITALIC.sub(r'\1', text)
    text = _CODE.sub(r'\1', text)
    text = _HEADING.sub('', text)
    text = _WHITESPACE.sub(' ', text)
    text = _UNSPEAKABLE.sub('', text)
    return text.strip()


def sanitize_text(text: str) -> str:
    """
    Strip markdown markup and unspeakable characters.

    Removes bold/italic/code markers and heading markers, collapses
    whitespace, drops anything that is not a word character, whitespace
    or basic punctuation, and trims. The result is stable:
    ``sanitize_text(sanitize_text(x)) == sanitize_text(x)``.
    """
    if not text:
        return ""

    result = _sanitize_once(text)
    # Dropping characters can join whitespace runs again
    while True:
        again = _sanitize_once(result)
        if again == result:
            return result
        result = again
