"""Context builder orchestrating discovery, scoring, allocation and rendering."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .allocator import BudgetPolicy, DEFAULT_POLICY, allocate
from .classifier import score_files
from .discovery import FileDiscovery, FilterOptions
from .models import BuildResult, Config, GroupInfo, GroupResult, ScoredFile
from .serializer import OutputFormat, render
from ..exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class GroupSpec:
    """One source tree to include in a build."""

    info: GroupInfo
    root: str
    options: FilterOptions = field(default_factory=FilterOptions)


ProgressCallback = Callable[[GroupResult], None]


class ContextBuilder:
    """Builds a budgeted context document from one or more source trees."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize builder with configuration."""
        self.config = config or Config()
        self.discovery = FileDiscovery(self.config)

    def scan(self, spec: GroupSpec) -> List[ScoredFile]:
        """
        Discover and classify the files of one group.

        Returns:
            Scored files sorted for allocation.
        """
        candidates = self.discovery.discover(spec.root, spec.options)
        return score_files(candidates)

    def scan_all(self, specs: Sequence[GroupSpec]) -> List[List[ScoredFile]]:
        """
        Scan every group, in parallel when there is more than one.

        Results keep the order of ``specs``. Configuration errors are checked
        for all groups before any scanning starts.
        """
        for spec in specs:
            if not os.path.isdir(spec.root):
                raise ConfigError(f"Path is not a directory: {spec.root}")
            spec.options.restricted_paths()

        workers = max(1, min(self.config.scan_workers, len(specs)))
        if workers == 1:
            return [self.scan(spec) for spec in specs]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.scan, specs))

    def build(self, specs: Sequence[GroupSpec], budget: int,
              fmt=OutputFormat.MARKDOWN,
              policy: BudgetPolicy = DEFAULT_POLICY,
              on_group: Optional[ProgressCallback] = None) -> BuildResult:
        """
        Build a context document.

        Args:
            specs: Groups in allocation order.
            budget: Global token budget.
            fmt: Output format.
            policy: Budget division policy between groups.
            on_group: Called with each group's result after allocation.

        Returns:
            BuildResult holding the document and per-group statistics.
        """
        scanned = self.scan_all(specs)
        selections = allocate(scanned, budget, policy)

        sections = []
        for spec, files, selection in zip(specs, scanned, selections):
            section = GroupResult(group=spec.info, selection=selection, discovered=len(files))
            logger.info(
                f"{spec.info.full_name}: {len(selection)}/{len(files)} files "
                f"(~{selection.consumed:,} tokens)"
            )
            if on_group:
                on_group(section)
            sections.append(section)

        document = render(sections, budget, fmt)
        return BuildResult(document=document, sections=sections, budget=budget)


def write_document(text: str, sink: str) -> str:
    """
    Write a rendered document to ``sink``.

    Raises:
        OSError: If the sink cannot be written. The caller still holds the
            document and may retry.
    """
    with open(sink, 'w', encoding='utf-8', newline='') as f:
        f.write(text)
    return sink
