#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import unittest

from objcat.wildcard import GlobMatcher, has_wildcard, literal_prefix
from tests.utils import cases


# pylint: disable=unused-variable
class TestWildcard(unittest.TestCase):
    def setUp(self) -> None:
        self.matcher = GlobMatcher()

    @cases(
        ("dir/log-*", True),
        ("dir/log-?.txt", True),
        ("dir/log.txt", False),
        ("", False),
    )
    def test_has_wildcard(self, test_case):
        value, expected = test_case
        self.assertEqual(expected, has_wildcard(value))

    @cases(
        ("dir/log-file-2024-*", "dir/log-file-2024-"),
        ("*.txt", ""),
        ("dir/?/x", "dir/"),
        ("no-wildcard", "no-wildcard"),
    )
    def test_literal_prefix(self, test_case):
        pattern, expected = test_case
        self.assertEqual(expected, literal_prefix(pattern))

    @cases(
        ("dir/log-file-2024-*", "dir/log-file-2024-01", True),
        ("dir/log-file-2024-*", "dir/log-file-2024-", True),
        ("dir/log-file-2024-*", "dir/log-file-2023-01", False),
        ("dir/log-file-2024-*", "other/dir/log-file-2024-01", False),
        ("*.txt", "a.txt", True),
        ("*.txt", "a.txt.gz", False),
        ("log-?", "log-1", True),
        ("log-?", "log-12", False),
        ("log-?", "log-", False),
    )
    def test_matches(self, test_case):
        pattern, key, expected = test_case
        self.assertEqual(expected, self.matcher.matches(pattern, key))

    @cases(
        ("dir/*", "dir/sub/file", False),
        ("*", "dir/file", False),
        ("dir/?file", "dir//file", False),
        ("dir/**", "dir/sub/file", True),
        ("**/file", "a/b/c/file", True),
        ("dir/***", "dir/a/b", True),
        ("dir/*/file", "dir/sub/file", True),
        ("dir/*/file", "dir/a/b/file", False),
    )
    def test_separator_policy(self, test_case):
        pattern, key, expected = test_case
        self.assertEqual(expected, self.matcher.matches(pattern, key))

    @cases(
        ("data.[0-9]*", "data.[0-9]x", True),
        ("data.[0-9]*", "data.5x", False),
        ("a+b(c)*", "a+b(c)d", True),
        ("dot.*", "dotx", False),
    )
    def test_regex_metacharacters_are_literal(self, test_case):
        pattern, key, expected = test_case
        self.assertEqual(expected, self.matcher.matches(pattern, key))

    def test_newline_in_key(self):
        self.assertTrue(self.matcher.matches("line*", "line\nbreak"))
