# kpi_app/services/kpi_importer.py
import csv
from io import TextIOWrapper
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import openpyxl
from django.db import DEFAULT_DB_ALIAS, transaction

from accounts.models import Team
from kpi_app.models import KpiGroup, KpiItem, TargetRole


# ---------- Public API ----------

def parse_kpi_rows(request) -> List[Dict[str, Any]]:
    """
    Return list[dict] from either a JSON array or a multipart CSV/XLSX
    uploaded under the 'file' key.
    """
    if "file" in request.FILES:
        f = request.FILES["file"]
        suffix = Path(f.name).suffix.lower()
        if suffix == ".csv":
            rows = list(csv.DictReader(TextIOWrapper(f.file, encoding="utf-8", newline="")))
            if not rows:
                raise ValueError("CSV appears empty.")
            return rows

        if suffix == ".xlsx":
            wb = openpyxl.load_workbook(f, data_only=True, read_only=True)
            ws = wb.active
            header_row = next(ws.iter_rows(min_row=1, max_row=1, values_only=True), None) or ()
            headers = [str(v).strip() if v is not None else "" for v in header_row]
            rows = []
            for r in ws.iter_rows(min_row=2, values_only=True):
                if all(v is None for v in r):
                    continue
                rows.append({headers[i]: r[i] for i in range(min(len(headers), len(r)))})
            if not rows:
                raise ValueError("XLSX sheet appears empty.")
            return rows

        raise ValueError("Unsupported file type. Upload CSV or XLSX.")

    data = request.data
    if not isinstance(data, list):
        raise ValueError('Expected a JSON array or upload a file as "file".')
    bad = [i for i, row in enumerate(data, start=1) if not isinstance(row, dict)]
    if bad:
        raise ValueError(f"Rows must be JSON objects (rows {', '.join(map(str, bad))}).")
    return data


class KpiImporter:
    """
    Bulk load of the KPI hierarchy, one row per KPI item:

        group | group_weight | target_role | team | item | item_weight

    - Teams must already exist (exact name); manager rows ignore the team.
    - Groups are matched on (name, target_role, team), items on (name, group).
    - Existing rows are left untouched; only missing ones are created.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def run(self, rows: List[Dict[str, Any]], *, dry_run: bool = False) -> Dict[str, Any]:
        cleaned = [_normalize(r, i) for i, r in enumerate(rows, start=1)]
        errors = [e for e in (self._validate(r) for r in cleaned) if e]
        if errors:
            return {"status": "invalid", "errors": errors}

        team_names = {r["team"] for r in cleaned if r["team"] and r["target_role"] == TargetRole.EMPLOYEE}
        teams = {t.name: t for t in Team.objects.using(self.using).filter(name__in=team_names)}
        missing = sorted(team_names - set(teams))
        if missing:
            return {"status": "invalid", "errors": [
                {"row": r["__row"], "errors": {"team": [f'Team "{r["team"]}" does not exist.']}}
                for r in cleaned if r["team"] in missing
            ]}

        if dry_run:
            groups, items = self._plan(cleaned, teams)
            return {"status": "ok", "to_create": {"kpi_groups": len(groups), "kpi_items": len(items)}}

        with transaction.atomic(using=self.using):
            created_groups, created_items = self._apply(cleaned, teams)
        return {
            "status": "imported",
            "created": {"kpi_groups": len(created_groups), "kpi_items": len(created_items)},
            "kpi_groups": [{"kpi_group_id": str(g.pk), "name": g.name} for g in created_groups],
            "kpi_items": [
                {"kpi_item_id": str(i.pk), "name": i.name, "group_name": i.kpi_group.name}
                for i in created_items
            ],
        }

    # ---------- Internal helpers ----------

    def _validate(self, row) -> Optional[Dict[str, Any]]:
        errs: Dict[str, List[str]] = {}
        for key in ("group", "item"):
            if not row[key]:
                errs[key] = ["This field is required."]
        for key in ("group_weight", "item_weight"):
            value = row[key]
            if value is None:
                errs[key] = ["A number between 0 and 100 is required."]
            elif not 0 <= value <= 100:
                errs[key] = ["Ensure this value is between 0 and 100."]
        if row["target_role"] is None:
            errs["target_role"] = ["Expected Employee or Manager."]
        elif row["target_role"] == TargetRole.EMPLOYEE and not row["team"]:
            errs["team"] = ["Required for employee KPIs."]
        return {"row": row["__row"], "errors": errs} if errs else None

    def _group_key(self, row, teams) -> Tuple[str, str, Any]:
        team = teams.get(row["team"]) if row["target_role"] == TargetRole.EMPLOYEE else None
        return row["group"], row["target_role"], team.pk if team else None

    def _existing_group(self, key):
        name, target_role, team_id = key
        return (KpiGroup.objects.using(self.using)
                .filter(name=name, target_role=target_role, team_id=team_id)
                .first())

    def _plan(self, cleaned, teams):
        groups, items = set(), set()
        for r in cleaned:
            gkey = self._group_key(r, teams)
            group = self._existing_group(gkey)
            if group is None:
                groups.add(gkey)
                items.add((gkey, r["item"]))
            elif not KpiItem.objects.using(self.using).filter(kpi_group=group, name=r["item"]).exists():
                items.add((gkey, r["item"]))
        return groups, items

    def _apply(self, cleaned, teams):
        group_cache: Dict[Tuple, KpiGroup] = {}
        created_groups: List[KpiGroup] = []
        created_items: List[KpiItem] = []
        for r in cleaned:
            gkey = self._group_key(r, teams)
            group = group_cache.get(gkey) or self._existing_group(gkey)
            if group is None:
                group = KpiGroup.objects.using(self.using).create(
                    name=gkey[0], target_role=gkey[1], team_id=gkey[2], weight=r["group_weight"],
                )
                created_groups.append(group)
            group_cache[gkey] = group

            item, created = KpiItem.objects.using(self.using).get_or_create(
                kpi_group=group, name=r["item"], defaults={"weight": r["item_weight"]},
            )
            if created:
                created_items.append(item)
        return created_groups, created_items


def _normalize(r: Dict[str, Any], index: int) -> Dict[str, Any]:
    """Map sheet headers to canonical keys."""
    def pick(*keys):
        for k in keys:
            if k in r and r[k] not in (None, ""):
                return str(r[k]).strip()
        return None

    return {
        "__row": index,
        "group":        pick("group", "Group", "KPI Group", "kpi_group"),
        "group_weight": _to_float(pick("group_weight", "Group Weight")),
        "target_role":  _to_role(pick("target_role", "Target Role", "Role") or TargetRole.EMPLOYEE),
        "team":         pick("team", "Team"),
        "item":         pick("item", "Item", "KPI Item", "kpi_item"),
        "item_weight":  _to_float(pick("item_weight", "Item Weight")),
    }


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value.rstrip("%"))
    except ValueError:
        return None


def _to_role(value: str) -> Optional[str]:
    for key, label in TargetRole.choices:
        if value.lower() in (key.lower(), label.lower()):
            return key
    return None
