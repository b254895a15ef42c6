from pathlib import Path

from certcard.processor.exceptions import FileReadError, OutputWriteError


class FileLoader:
    """Reads input files and writes composed cards."""

    def load(self, path: Path) -> bytes:
        """Read file bytes from disk.

        Raises:
            FileReadError: if the file does not exist or cannot be read.
        """
        if not path.is_file():
            raise FileReadError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}: {exc}") from exc

    def write(self, output_dir: Path, filename: str, data: bytes) -> Path:
        """Write ``data`` to ``output_dir/filename``, creating the directory.

        Raises:
            OutputWriteError: if the file cannot be written.
        """
        target = output_dir / filename
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise OutputWriteError(f"Cannot write {target}: {exc}") from exc
        return target
