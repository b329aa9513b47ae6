"""Recommendation modules shown alongside search results."""

from libdiscover.recommend.authority import AuthorityRecommend, HiddenFilterSpec

__all__ = ["AuthorityRecommend", "HiddenFilterSpec"]
