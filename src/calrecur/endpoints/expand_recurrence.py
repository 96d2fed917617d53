#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime
import logging

import hydra
from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from calrecur.constants import CONFIGS_ROOT, EXPAND_CONFIG_NAME
from calrecur.exceptions import RuleDefinitionError
from calrecur.recurrence import (
    OccurrenceStatus,
    RecurrenceExpansion,
    expand_occurrences,
    find_next_recurrence_date,
    iter_occurrences,
)
from calrecur.time_utils import RecurrenceRule

logger = logging.getLogger(__name__)

STATUS_MARKUP = {
    OccurrenceStatus.OCCURRED: "[green]occurred[/green]",
    OccurrenceStatus.SKIPPED_INVALID_DATE: "[yellow]skipped[/yellow]",
    OccurrenceStatus.EXCEEDED_BOUND: "[red]exceeded bound[/red]",
}


def build_rule(rule_cfg: DictConfig) -> RecurrenceRule:
    """Create a rule from the `rule` node of the endpoint config."""
    fields = OmegaConf.to_container(rule_cfg, resolve=True)
    try:
        return RecurrenceRule(**fields)
    except ValidationError as e:
        raise RuleDefinitionError(f"Invalid recurrence rule {fields}: {e}") from e


def parse_after(after: str | None) -> datetime.date | None:
    if after is None:
        return None
    return datetime.date.fromisoformat(str(after))


def occurrence_table(rule: RecurrenceRule, max_probe: int) -> Table:
    """Tabulate the start date and every index probed while expanding `rule`."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Index", style="dim", justify="right")
    table.add_column("Date", style="white")
    table.add_column("Status", style="white")
    table.add_row("0", rule.start_date.isoformat(), "[bold]original[/bold]")
    if not rule.recurs:
        return table
    for occurrence in iter_occurrences(rule, first_index=1, max_probe=max_probe):
        table.add_row(
            str(occurrence.index),
            occurrence.date.isoformat() if occurrence.date else "-",
            STATUS_MARKUP[occurrence.status],
        )
    return table


def summary(
    expansion: RecurrenceExpansion,
    after: datetime.date | None = None,
    next_date: datetime.date | None = None,
) -> str:
    lines = [
        f"[bold]{len(expansion.dates)}[/bold] occurrences "
        f"from {expansion.probes} probes"
    ]
    if expansion.truncated:
        lines.append(
            "[yellow]Expansion truncated, later occurrences may exist[/yellow]"
        )
    if after is not None:
        found = next_date.isoformat() if next_date else "none"
        lines.append(f"Next occurrence after {after.isoformat()}: {found}")
    return "\n".join(lines)


@hydra.main(
    config_name=EXPAND_CONFIG_NAME,
    config_path=CONFIGS_ROOT,
    version_base=None,
)
def expand_recurrence(cfg: DictConfig):
    if cfg.debug:
        logger.info(OmegaConf.to_yaml(cfg, resolve=True))
    rule = build_rule(cfg.rule)
    after = parse_after(cfg.after)
    logger.info(f"Expanding {rule.type} rule starting {rule.start_date}")

    console = Console()
    console.print(occurrence_table(rule, cfg.max_probe))
    expansion = expand_occurrences(rule, max_probe=cfg.max_probe)
    next_date = None
    if after is not None:
        next_date = find_next_recurrence_date(after, rule, max_probe=cfg.max_probe)
    console.print(summary(expansion, after=after, next_date=next_date))


if __name__ == "__main__":
    expand_recurrence()
