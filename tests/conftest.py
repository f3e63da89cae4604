"""Shared test fixtures and configuration."""

import subprocess
from pathlib import Path
from typing import Optional

import pytest

from hunksplit.engine.models import Hunk


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return stdout; fail the test on error."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, f"git {' '.join(args)} failed: {result.stderr}"
    return result.stdout


def numbered_lines(count: int, prefix: str = "line") -> str:
    """File content with ``count`` distinct numbered lines."""
    return "".join(f"{prefix} {i}\n" for i in range(1, count + 1))


def capture_change(repo: Path, files: dict[str, Optional[str]]) -> str:
    """Write ``files``, capture the resulting staged diff, then undo it.

    A None content deletes the file.

    Returns:
        Diff text as produced by 'git diff --cached'
    """
    for path, content in files.items():
        full_path = repo / path
        if content is None:
            full_path.unlink()
            continue
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)
    git(repo, "add", "-A")
    diff_text = git(repo, "diff", "--cached", "--binary")
    git(repo, "reset", "--hard", "-q", "HEAD")
    return diff_text


def commit_files(repo: Path, files: dict[str, str], message: str = "Add files") -> None:
    for path, content in files.items():
        full_path = repo / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository for testing."""
    repo_dir = tmp_path / "test_repo"
    repo_dir.mkdir()

    git(repo_dir, "init", "-q")
    git(repo_dir, "config", "user.email", "test@example.com")
    git(repo_dir, "config", "user.name", "Test User")
    git(repo_dir, "config", "commit.gpgsign", "false")
    git(repo_dir, "symbolic-ref", "HEAD", "refs/heads/main")

    # Create initial commit
    (repo_dir / "README.md").write_text("# Test Repo\n")
    git(repo_dir, "add", "README.md")
    git(repo_dir, "commit", "-q", "-m", "Initial commit")

    return repo_dir


@pytest.fixture
def sample_diff():
    """Two files: a modified file with two hunks and a new file."""
    return """diff --git a/src/main.py b/src/main.py
index 1234567..abcdefg 100644
--- a/src/main.py
+++ b/src/main.py
@@ -10,6 +10,8 @@ def main():
     print("Hello")
+    print("World")
+    print("!")
     return 0
@@ -40,3 +42,5 @@ def helper():
     pass
+    # New comment
+    return True
diff --git a/tests/test_main.py b/tests/test_main.py
new file mode 100644
index 0000000..1234567
--- /dev/null
+++ b/tests/test_main.py
@@ -0,0 +1,5 @@
+import pytest
+
+def test_main():
+    assert True
+
"""


@pytest.fixture
def no_newline_diff():
    """A hunk whose last line has no trailing newline."""
    return """diff --git a/notes.txt b/notes.txt
index 1111111..2222222 100644
--- a/notes.txt
+++ b/notes.txt
@@ -1,2 +1,2 @@
 first
-second
\\ No newline at end of file
+second changed
\\ No newline at end of file
"""


def make_hunk(file_path: str, start: int, end: int, body: str = " a\n-b\n+c\n d", **kwargs) -> Hunk:
    """Build a Hunk with a header matching its range.

    The default body replaces one line, so the hunk has no net line delta.
    """
    count = end - start + 1
    content = f"@@ -{start},{count} +{start},{count} @@\n{body}"
    return Hunk(file_path=file_path, start_line=start, end_line=end, content=content, **kwargs)
