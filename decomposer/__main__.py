"""
CLI 入口

用法:
    # 拆解單一錄製腳本，輸出到預設目錄 (DECOMPOSER_OUTPUT_DIR 或 ./output)
    python -m decomposer recorded/LoginTest.java

    # 多個檔案共用同一組 Page Object
    python -m decomposer recorded/*.java --output ~/my_tests

    # 自訂標記 / 套件名稱
    python -m decomposer LoginTest.java --config decomposer.json
"""

import argparse
import sys

from config.config import Config
from core.exceptions import ConfigError, DecomposerError
from decomposer.engine import PageObjectDecomposer
from decomposer.writer import SourceWriter
from utils.logger import logger, set_console_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m decomposer",
        description="錄製腳本 → Page Object 拆解器",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
範例:
  python -m decomposer LoginTest.java                    # 輸出到預設目錄
  python -m decomposer *.java --output ./generated       # 指定輸出目錄
  python -m decomposer LoginTest.java --config my.json   # 自訂設定
""",
    )
    parser.add_argument("files", nargs="+", help="Selenium IDE 匯出的 .java 檔")
    parser.add_argument("--output", help="輸出目錄")
    parser.add_argument("--config", help="JSON 設定檔路徑")
    parser.add_argument(
        "--log-file", default="decomposer_warnings.log",
        help="警告紀錄檔名（寫在輸出目錄下）",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="console 顯示 DEBUG 訊息",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_console_level("DEBUG")

    try:
        settings = Config.load_settings(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"設定錯誤: {e}", file=sys.stderr)
        return 2

    output = args.output or Config.OUTPUT_DIR
    decomposer = PageObjectDecomposer(settings)
    writer = SourceWriter(output)

    print(f"\n{'='*60}")
    print(f"  Page Object 拆解器")
    print(f"  輸入:   {len(args.files)} 個檔案")
    print(f"  輸出:   {writer.output}")
    print(f"{'='*60}\n")

    failed: list[str] = []
    for path in args.files:
        try:
            decomposer.analyze_file(path)
            print(f"  ✓ {path}")
        except DecomposerError as e:
            logger.error(f"{path}: {e}", extra={"source": path})
            print(f"  ✗ {path}  ({e})")
            failed.append(path)

    files = writer.write_all(decomposer.units)
    log_path = writer.write_log(decomposer.logs, args.log_file)
    summary = decomposer.summary()

    print(f"\n{'='*60}")
    print(f"  拆解完成！")
    print(f"  檔案數:   {len(files)}")
    print(f"  測試方法: {len(summary['test_methods'])}")
    print(f"  Page:     {len(summary['pages'])} 個")
    for page, methods in summary["pages"].items():
        print(f"    - {page}: {', '.join(methods) or '(無方法)'}")
    print(f"  警告:     {summary['warnings']} 筆 → {log_path.name}")
    if failed:
        print(f"  失敗:     {', '.join(failed)}")
    print(f"{'='*60}\n")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
