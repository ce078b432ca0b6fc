"""
Markdown Converter Implementation

Converts rewritten HTML into markdown with markdownify, extending its
converter with the hr marker, code block style, emphasis delimiters and
reference-style links the crawler can be configured for.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from markdownify import (
    ATX,
    SETEXT,
    MarkdownConverter,
    abstract_inline_conversion,
    chomp,
    strip_pre,
)

from site2md.core.base import ConversionError, ConversionOptions, ConverterInterface
from site2md.core.logging import get_logger


_EXCESS_BLANK_LINES = re.compile(r'\n{3,}')
_CODE_BLOCK_TOKEN = '\ue000%d\ue001'


class SiteMarkdownConverter(MarkdownConverter):
    """markdownify converter with configurable markers and link style"""

    class Options(MarkdownConverter.DefaultOptions):
        hr = '---'
        code_block_style = 'fenced'
        em_delimiter = '*'
        strong_delimiter = '**'
        link_style = 'inlined'

    def __init__(self, **options):
        super().__init__(**options)
        self.references: List[Tuple[str, Optional[str]]] = []
        self.code_blocks: List[str] = []

    def convert(self, html):
        self.references = []
        self.code_blocks = []
        text = _EXCESS_BLANK_LINES.sub('\n\n', super().convert(html)).strip()

        # Nested blocks are stored before their parents, so restore last first
        for n in reversed(range(len(self.code_blocks))):
            text = text.replace(_CODE_BLOCK_TOKEN % n, self.code_blocks[n])

        if self.references:
            text = text.rstrip('\n') + '\n\n' + '\n'.join(
                self._reference_line(n, href, title)
                for n, (href, title) in enumerate(self.references, start=1)
            )
        return text

    @staticmethod
    def _reference_line(n: int, href: str, title: Optional[str]) -> str:
        title_part = ' "%s"' % title.replace('"', r'\"') if title else ''
        return '[%d]: %s%s' % (n, href, title_part)

    def convert_a(self, el, text, parent_tags):
        if self.options['link_style'] != 'referenced':
            return super().convert_a(el, text, parent_tags)

        if '_noformat' in parent_tags:
            return text
        prefix, suffix, text = chomp(text)
        if not text:
            return ''
        href = el.get('href')
        if not href:
            return text
        title = el.get('title')
        if self.options['autolinks'] and text.replace(r'\_', '_') == href and not title:
            return '<%s>' % href

        self.references.append((href, title))
        return '%s[%s][%d]%s' % (prefix, text, len(self.references), suffix)

    convert_em = abstract_inline_conversion(lambda self: self.options['em_delimiter'])
    convert_i = convert_em

    convert_b = abstract_inline_conversion(lambda self: self.options['strong_delimiter'])
    convert_strong = convert_b

    def convert_head(self, el, text, parent_tags):
        return ''

    def convert_hr(self, el, text, parent_tags):
        return '\n\n%s\n\n' % self.options['hr']

    def convert_pre(self, el, text, parent_tags):
        if self.options['code_block_style'] == 'indented':
            if not text:
                return ''
            lines = strip_pre(text).split('\n')
            block = '\n'.join(('    ' + line) if line else '' for line in lines)
        else:
            block = super().convert_pre(el, text, parent_tags).strip('\n')
            if not block:
                return ''

        # Held out of the blank-line collapse until convert() restores it
        self.code_blocks.append(block)
        return '\n\n%s\n\n' % (_CODE_BLOCK_TOKEN % (len(self.code_blocks) - 1))


class ContentConverter(ConverterInterface):
    """
    Converter component wrapping SiteMarkdownConverter.

    A fresh markdownify converter is built per call so reference numbering
    never leaks between documents.
    """

    def __init__(self, config: ConversionOptions):
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.converter_options = self._build_options(config)

    @staticmethod
    def _build_options(options: ConversionOptions) -> Dict[str, Any]:
        return {
            'heading_style': SETEXT if options.heading_style == 'setext' else ATX,
            'bullets': options.bullet_list_marker,
            'hr': options.hr,
            'code_block_style': options.code_block_style,
            'em_delimiter': options.em_delimiter,
            'strong_delimiter': options.strong_delimiter,
            'link_style': options.link_style,
        }

    async def initialize(self) -> None:
        """Initialize the component"""
        self.logger.debug("Initializing markdown converter")
        self._initialized = True

    async def cleanup(self) -> None:
        """Clean up resources"""
        self._initialized = False

    def convert(self, html: str) -> str:
        """
        Convert HTML to markdown

        Args:
            html: Rewritten page markup

        Returns:
            Markdown content

        Raises:
            ConversionError: If conversion fails or produces no content
        """
        try:
            markdown = SiteMarkdownConverter(**self.converter_options).convert(html)
        except Exception as e:
            raise ConversionError(f"Error converting HTML to markdown: {e}")

        markdown = markdown.rstrip()
        if not markdown:
            raise ConversionError("Conversion produced empty markdown")

        return markdown + '\n'
