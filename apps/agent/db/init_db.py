from __future__ import annotations

from typing import Optional

from .engine import make_engine
from .models import Base


def init_db(url: Optional[str] = None) -> None:
    Base.metadata.create_all(bind=make_engine(url))


def main():
    init_db()
    print("DB initialized (tables created).")


if __name__ == "__main__":
    main()
