"""
Element tables used by the tokenizer and the tree builder.

These are kept as plain data so that the parser's recovery rules can be
read (and adjusted) in one place.
"""

# Elements that never have content and never get an end tag
VOID_ELEMENTS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr'
})

# Elements whose content is raw text up to the matching end tag
RAW_TEXT_ELEMENTS = frozenset({'script', 'style'})

# Block-level elements that implicitly close an open paragraph
BLOCK_ELEMENTS = frozenset({
    'address', 'article', 'aside', 'blockquote', 'details', 'dialog', 'div',
    'dl', 'fieldset', 'figcaption', 'figure', 'footer', 'form',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'header', 'hgroup', 'hr', 'main',
    'menu', 'nav', 'ol', 'p', 'pre', 'section', 'table', 'ul'
})

# Open element -> incoming start tags that close it first.
# Only the current (innermost) open element is checked, repeatedly.
IMPLICIT_CLOSE = {
    'p': BLOCK_ELEMENTS,
    'li': frozenset({'li'}),
    'dt': frozenset({'dt', 'dd'}),
    'dd': frozenset({'dt', 'dd'}),
    'option': frozenset({'option', 'optgroup'}),
    'optgroup': frozenset({'optgroup'}),
    'tr': frozenset({'tr', 'thead', 'tbody', 'tfoot'}),
    'td': frozenset({'td', 'th', 'tr', 'thead', 'tbody', 'tfoot'}),
    'th': frozenset({'td', 'th', 'tr', 'thead', 'tbody', 'tfoot'}),
    'thead': frozenset({'tbody', 'tfoot'}),
    'tbody': frozenset({'tbody', 'tfoot'}),
}

# Tag name of the synthetic element at the top of every tree
ROOT_TAG = '#root'
