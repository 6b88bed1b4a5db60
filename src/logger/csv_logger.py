import csv
import logging
import os

logger = logging.getLogger(__name__)


class CSVLogger:
    """Row-per-tick CSV writer, flushed after every row so partial runs stay readable."""

    def __init__(self, log_path: str, columns: list[str]):
        os.makedirs(os.path.dirname(os.path.abspath(log_path)), exist_ok=True)
        self.columns = columns
        self.file = open(log_path, "w", newline="")
        self.writer = csv.writer(self.file)
        self.writer.writerow(columns)

    def log(self, row: list):
        if not isinstance(row, (list, tuple)):
            raise TypeError(f"Unsupported row type: {type(row)}")
        if len(row) != len(self.columns):
            logger.warning(f"Row length {len(row)} does not match columns {len(self.columns)}")

        self.writer.writerow([self._format_value(v) for v in row])
        self.file.flush()

    @staticmethod
    def _format_value(val) -> str:
        if isinstance(val, bool):
            return "True" if val else "False"
        if isinstance(val, float):
            return f"{val:.6f}"
        return str(val)

    def close(self):
        if self.file is not None:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
