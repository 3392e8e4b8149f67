"""
Source Writer
把拆解結果寫成 .java 檔，目錄依 package 展開：

    <output>/TestCases/TestCases.java
    <output>/TestCases/PO/PO_login.java
"""

from pathlib import Path

from decomposer.nodes import SourceUnit
from utils.logger import logger


class SourceWriter:
    """產生 .java 檔"""

    def __init__(self, output_dir: str | Path):
        self.output = Path(output_dir).resolve()

    def path_for(self, unit: SourceUnit) -> Path:
        package_dir = self.output.joinpath(*unit.package.split(".")) if unit.package else self.output
        return package_dir / f"{unit.main_class.name}.java"

    def write(self, unit: SourceUnit) -> Path:
        path = self.path_for(unit)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(unit.render(), encoding="utf-8")
        logger.debug(f"寫入 {path}")
        return path

    def write_all(self, units: list[SourceUnit]) -> list[Path]:
        return [self.write(unit) for unit in units]

    def write_log(self, entries: list[str], name: str = "decomposer_warnings.log") -> Path:
        """警告紀錄一行一筆"""
        self.output.mkdir(parents=True, exist_ok=True)
        path = self.output / name
        path.write_text("".join(f"{e}\n" for e in entries), encoding="utf-8")
        return path
