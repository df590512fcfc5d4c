import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


LANDING_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Acme Landing</title>
  <style>
    .card { display: flex; padding: 16px; }
    .card__title { font-weight: 700; }
  </style>
</head>
<body>
  <header class="site-header">
    <nav class="navbar">
      <a href="/">Home</a>
      <a href="/about">About</a>
    </nav>
  </header>
  <main>
    <ul class="cards">
      <li class="card"><h3 class="card__title">Alpha</h3><p>First product</p></li>
      <li class="card"><h3 class="card__title">Beta</h3><p>Second product</p></li>
      <li class="card"><h3 class="card__title">Gamma</h3><p>Third product</p></li>
    </ul>
  </main>
  <footer><p>&copy; Acme</p></footer>
</body>
</html>
"""


@pytest.fixture
def landing_page() -> str:
    return LANDING_PAGE


