"""Read RPN expressions from text files and archives."""
from pathlib import Path
import tarfile
import tempfile
from typing import List
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath


class ExpressionSource(BaseModel):
    """
    File holding RPN expressions, one per line.

    The expression source:
    - reads a plain text file directly
    - otherwise extracts the first .txt member of a .zip, .tar.xz or .7z archive
    - drops blank lines and surrounding whitespace
    """

    model_config = ConfigDict(frozen=True)

    path: FilePath = Field(..., description="Path to the input file or archive")

    def read_text(self) -> str:
        """
        Return the raw text of the input file or of the archived text file.

        :return: File content
        :rtype: str
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        if self.path.suffix == ".txt":
            return self.path.read_text(encoding="utf-8")
        return self._extract_archive(self.path)

    def expressions(self) -> List[str]:
        """
        Return the non-empty, stripped lines of the input.

        :return: Expressions in file order
        :rtype: List[str]
        """
        return [line.strip() for line in self.read_text().splitlines() if line.strip()]

    def _extract_archive(self, archive_path: Path) -> str:
        """
        Extract the first .txt file found in a supported archive and return its content as a string.

        Supported formats:
        - .zip
        - .tar.xz
        - .7z

        :param Path archive_path: Path to the archive file

        :return: Content of the extracted .txt file
        :rtype: str
        :raises ValueError: If no .txt file is found or format is unsupported
        """
        # Create a temporary directory for safe extraction
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            if archive_path.suffix == ".zip":
                with zipfile.ZipFile(archive_path, "r") as zf:
                    txt_files = [f for f in zf.namelist() if f.endswith(".txt")]
                    if not txt_files:
                        raise ValueError("📄❌ No .txt file found in zip archive")
                    zf.extract(txt_files[0], path=tmpdir_path)
                    return (tmpdir_path / txt_files[0]).read_text(encoding="utf-8")

            elif archive_path.suffixes[-2:] == [".tar", ".xz"]:
                with tarfile.open(archive_path, "r:xz") as tf:
                    txt_files = [m for m in tf.getmembers() if m.isfile() and m.name.endswith(".txt")]
                    if not txt_files:
                        raise ValueError("📄❌ No .txt file found in tar.xz archive")
                    tf.extract(txt_files[0], path=tmpdir_path, filter="data")
                    return (tmpdir_path / txt_files[0].name).read_text(encoding="utf-8")

            elif archive_path.suffix == ".7z":
                with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                    txt_files = [f for f in archive.getnames() if f.endswith(".txt")]
                    if not txt_files:
                        raise ValueError("📄❌ No .txt file found in 7z archive")
                    archive.extract(targets=[txt_files[0]], path=tmpdir_path)
                    return (tmpdir_path / txt_files[0]).read_text(encoding="utf-8")

            else:
                raise ValueError(f"📄❌ Unsupported archive format: {archive_path.suffix}")
