"""Creates the data directory and an empty carts table."""
import os
import sys

import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import db  # noqa: E402

CART_COLUMNS = ["id", "user_id", "items", "created_at", "updated_at"]


if __name__ == "__main__":
    path = db._file_path("carts")
    if not path.exists():
        db._write_df("carts", pd.DataFrame(columns=CART_COLUMNS))
        print(f"Created {path}")
    else:
        print(f"{path} already exists")
