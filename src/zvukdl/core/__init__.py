# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Core utilities for zvuk-dl."""

from zvukdl.core.url_parser import CatalogRequest, ParsedURL, URLParser, group_urls

__all__ = ["CatalogRequest", "ParsedURL", "URLParser", "group_urls"]
