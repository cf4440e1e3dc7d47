"""Shared fixtures for core unit tests"""

import pytest

from mdworkspace.core.render import MarkdownItRenderer


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading *2*

- item one
- item two

```python
# not a heading
print("hello")
```

```mermaid
graph TD
# also not a heading
```

### [Link](https://example.com) `code`

#hashtag line
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="renderer")
def renderer_fixture():
    return MarkdownItRenderer("gfm-like")
