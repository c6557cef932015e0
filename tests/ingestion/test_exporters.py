from datetime import datetime, timezone

import pandas as pd
import pytest

from list_distributor.errors import UnsupportedFileTypeError
from list_distributor.ingestion.exporters import export_snapshot, snapshot_to_dataframe, summary_to_dataframe
from list_distributor.models import AgentAssignment, DistributionSnapshot, Record


def _build_sample_snapshot() -> DistributionSnapshot:
    return DistributionSnapshot(
        id="abc123",
        file_name="contacts.csv",
        upload_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        total_records=3,
        assignments=(
            AgentAssignment(
                agent_id="a1",
                agent_name="Ada Lovelace",
                records=(
                    Record(first_name="Alan", phone="555-1111", notes="vip"),
                    Record(first_name="Barbara", phone="555-2222"),
                ),
            ),
            AgentAssignment(
                agent_id="a2",
                agent_name="Grace/Hopper",
                records=(Record(first_name="Claude", phone="555-3333"),),
            ),
            AgentAssignment(agent_id="a3", agent_name="Idle Agent", records=()),
        ),
    )


def test_snapshot_to_dataframe_preserves_distribution_order():
    dataframe = snapshot_to_dataframe(_build_sample_snapshot())

    assert list(dataframe.columns) == ["agent_id", "agent_name", "firstName", "phone", "notes"]
    assert list(dataframe["firstName"]) == ["Alan", "Barbara", "Claude"]
    assert list(dataframe["agent_id"]) == ["a1", "a1", "a2"]


def test_summary_to_dataframe_counts_every_agent():
    summary = summary_to_dataframe(_build_sample_snapshot())

    assert list(summary["record_count"]) == [2, 1, 0]


def test_export_snapshot_to_csv_and_excel(tmp_path):
    snapshot = _build_sample_snapshot()

    csv_path = tmp_path / "out" / "distribution.csv"
    excel_path = tmp_path / "distribution.xlsx"

    export_snapshot(snapshot, csv_path)
    export_snapshot(snapshot, excel_path)

    csv_frame = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    assert csv_frame.loc[0, "agent_name"] == "Ada Lovelace"
    assert csv_frame.loc[2, "phone"] == "555-3333"

    sheets = pd.read_excel(excel_path, sheet_name=None)
    assert list(sheets) == ["Summary", "Ada Lovelace", "Grace_Hopper", "Idle Agent"]
    assert list(sheets["Ada Lovelace"]["firstName"]) == ["Alan", "Barbara"]
    assert sheets["Idle Agent"].empty


def test_export_snapshot_rejects_unknown_extension(tmp_path):
    with pytest.raises(UnsupportedFileTypeError):
        export_snapshot(_build_sample_snapshot(), tmp_path / "distribution.json")
