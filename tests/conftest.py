"""Shared fixtures."""

import pytest

SAMPLE_DOCUMENT = """\
---
id: 001
title: "Write docs"
status: pending
priority: high
tags: [docs, api]
owner: alice
created: 2024-01-15
---

# Task Details

Some context.

## Notes
First note.

## Checklist

- [ ] outline
- [x] draft
* [X] review
not an item

## Later
tail text
"""


@pytest.fixture
def sample_text() -> str:
    """A task document exercising every recognized construct."""
    return SAMPLE_DOCUMENT
