"""
MDX Catalog - lint and index Markdown/MDX article collections.

This package reads content files made of a ``---`` frontmatter block
(title, publishedAt, summary, tags) followed by a Markdown body, checks
them for well-formedness, and builds a JSON/HTML site index.

Main entry point is the CLI via the `mdx-catalog` command.

Example:
    $ mdx-catalog lint content/
    $ mdx-catalog index content/ -o public/
"""

__all__ = [
    "__version__",
    "Article",
    "FrontmatterError",
    "build_index",
    "lint_articles",
    "load_articles",
    "parse_article",
]
__version__ = "0.1.0"

from .index import build_index
from .lint import lint_articles
from .parser import FrontmatterError, load_articles, parse_article
from .types import Article
