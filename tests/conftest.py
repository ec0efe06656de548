import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so `import path_converter...` works locally
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def vault(tmp_path):
    """A small vault with notes, an attachment folder and a config dot-folder."""
    root = tmp_path / "vault"
    (root / "notes").mkdir(parents=True)
    (root / "images").mkdir()
    (root / ".obsidian").mkdir()
    (root / "notes" / "a.md").write_text("![cover](images\\cover.png)\n", encoding="utf-8")
    (root / "notes" / "b.md").write_text("no embeds here\n", encoding="utf-8")
    (root / "images" / "cover.png").write_bytes(b"\x89PNG")
    (root / ".obsidian" / "hidden.md").write_text("![x](a\\b.png)\n", encoding="utf-8")
    return root
