"""
Instruction Router

測試方法內的狀態機

狀態只有兩種：
- Main：敘述直接進測試方法（suite method）
- InPage：敘述進目前 page 的草稿方法（draft），碰到下一個標記 / assert / 結尾才 flush

    enter(p, m)        → flush → 建立 draft → InPage
    backToMain         → flush → Main
    assert（InPage）    → 先收掉 draft → Bifurcator → Main
    結尾               → flush
"""

from __future__ import annotations

from dataclasses import dataclass, field

from config.config import DecomposerSettings
from decomposer.arguments import ArgumentExtractor, PendingArguments
from decomposer.assertions import AssertionBifurcator, contains_assertion, is_assertion_call
from decomposer.delimiter import BACK_TO_MAIN, Delimiter, DelimiterScanner
from decomposer.log_sink import WarningLog
from decomposer.methods import MethodNamer
from decomposer.nodes import (
    Block, ClassDecl, Comment, ExpressionStmt, MethodCall, MethodDecl, Name,
    Statement, StatementKind,
)
from decomposer.registry import PageObjectRegistry
from utils.logger import logger


@dataclass
class PageMethodDraft:
    """還沒決定名稱的 page 方法"""
    page: ClassDecl
    method: MethodDecl

    @property
    def is_empty(self) -> bool:
        return self.method.body.is_empty


@dataclass
class AnalysisContext:
    """一個測試方法的分析狀態，分析結束即丟棄"""
    suite_method: MethodDecl
    throws: list[str] = field(default_factory=list)
    draft: PageMethodDraft | None = None
    bindings: dict[str, str] = field(default_factory=dict)
    pending: PendingArguments = field(default_factory=PendingArguments)

    @property
    def in_page(self) -> bool:
        return self.draft is not None

    @property
    def current_page(self) -> ClassDecl | None:
        return self.draft.page if self.draft is not None else None

    @property
    def target(self) -> MethodDecl:
        """目前敘述要加入的方法"""
        return self.draft.method if self.draft is not None else self.suite_method


class InstructionRouter:
    """把錄製腳本的敘述分派到測試方法或 Page Object 方法"""

    def __init__(
        self,
        settings: DecomposerSettings,
        registry: PageObjectRegistry,
        namer: MethodNamer,
        log: WarningLog,
    ):
        self.settings = settings
        self.registry = registry
        self.namer = namer
        self.log = log
        self.scanner = DelimiterScanner(settings)
        self.extractor = ArgumentExtractor()
        self.bifurcator = AssertionBifurcator(namer, self.extractor)

    def route(self, suite_method: MethodDecl, statements: list[Statement]) -> AnalysisContext:
        """
        逐行分派 statements，結果寫進 suite_method 與相關的 Page Object。

        Args:
            suite_method: 空 body 的測試方法
            statements: 錄製腳本原本的敘述（不會被修改）

        Returns:
            分析結束時的 context（測試用）
        """
        context = AnalysisContext(suite_method=suite_method, throws=list(suite_method.throws))
        for statement in statements:
            self.dispatch(context, statement)
        self.flush(context)
        logger.debug(
            f"{suite_method.name}: {len(suite_method.body.statements)} 行, "
            f"pages={list(context.bindings)}"
        )
        return context

    def dispatch(self, context: AnalysisContext, statement: Statement) -> None:
        marker = self.scanner.scan(statement)
        if isinstance(marker, Delimiter):
            self._enter(context, marker)
            return
        if marker is BACK_TO_MAIN:
            self.flush(context)
            return

        kind = statement.kind
        if kind is StatementKind.CALL:
            self._call(context, statement)
        elif kind is StatementKind.BLOCK:
            self._block(context, statement)
        elif kind is StatementKind.COMMENT:
            context.target.body.comments.append(statement.clone())
        else:
            context.target.body.append(statement.clone())

    def _enter(self, context: AnalysisContext, marker: Delimiter) -> None:
        self.flush(context)
        page = self.registry.ensure(marker.page)
        self.registry.bind(context, page)
        context.draft = PageMethodDraft(
            page=page,
            method=MethodDecl(name=marker.method, throws=list(context.throws)),
        )
        logger.debug(f"進入 {marker.page}.{marker.method}")

    def flush(self, context: AnalysisContext) -> None:
        """把 draft 收成正式的 page 方法，並在測試方法中呼叫它"""
        draft = context.draft
        try:
            if draft is None:
                return
            if draft.is_empty:
                self.log.warning(
                    f"{draft.page.name}.{draft.method.name} 沒有任何動作，已略過"
                )
                return
            resolved = self.namer.register(
                draft.page, draft.method, context.pending.placeholders
            )
            variable = self.registry.bind(context, draft.page)
            context.suite_method.body.append(ExpressionStmt(MethodCall(
                Name(variable),
                resolved.name,
                [value.clone() for value in context.pending.values],
            )))
        finally:
            context.pending.clear()
            context.draft = None

    def _discard_or_flush(self, context: AnalysisContext) -> None:
        """assert 之前收掉 draft；空的 draft 直接丟掉，只記 debug 不記警告"""
        if context.draft is not None and context.draft.is_empty:
            logger.debug(
                f"{context.suite_method.name}: {context.draft.page.name}."
                f"{context.draft.method.name} 沒有動作就遇到 assert，略過空方法"
            )
            context.draft = None
            context.pending.clear()
        self.flush(context)

    def _call(self, context: AnalysisContext, statement: ExpressionStmt) -> None:
        if is_assertion_call(statement) and context.in_page:
            page = context.current_page
            self._discard_or_flush(context)
            variable = self.registry.bind(context, page)
            if not self.bifurcator.split_statement(context, page, variable, statement):
                context.suite_method.body.append(statement.clone())
            return

        if context.in_page:
            extracted = self.extractor.extract(statement.clone(), context.pending)
            context.target.body.extend(extracted)
        else:
            context.target.body.append(statement.clone())

    def _block(self, context: AnalysisContext, block: Block) -> None:
        if not context.in_page:
            context.target.body.append(block.clone())
            return

        if contains_assertion(block):
            page = context.current_page
            self._discard_or_flush(context)
            variable = self.registry.bind(context, page)
            if not self.bifurcator.split_block(context, page, variable, block):
                self.log.warning(
                    f"{context.suite_method.name}: 無法辨識的 assert 區塊，原樣保留"
                )
                context.suite_method.body.append(block.clone())
            return

        context.target.body.append(self._rebuild(block, context.pending))

    def _rebuild(self, block: Block, pending: PendingArguments) -> Block:
        """複製區塊，並對每一行執行 Extractor"""
        rebuilt = Block(comments=[c.clone() for c in block.comments])
        for child in block.statements:
            if isinstance(child, Block):
                rebuilt.append(self._rebuild(child, pending))
            elif isinstance(child, Comment):
                rebuilt.append(child.clone())
            else:
                rebuilt.extend(self.extractor.extract(child.clone(), pending))
        return rebuilt
