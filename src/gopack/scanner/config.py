# Default patterns to ignore while scanning a Go source tree
DEFAULT_IGNORE_PATTERNS = [
    ".gopack/",
    ".git/",
    ".hg/",
    ".svn/",
    ".bzr/",
    "_*/",
    "testdata/",
]

GO_SOURCE_SUFFIX = ".go"
GO_TEST_SUFFIX = "_test.go"
