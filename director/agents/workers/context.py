"""Rendering of caller activity snapshots into worker task text."""

from __future__ import annotations

from director.agents.types import ActivitySnapshot

MAX_LEADS = 5
MAX_CALLS = 3


def render_activity_snapshot(snapshot: ActivitySnapshot) -> str:
    """Render a snapshot as a markdown block (stats, leads, calls, team)."""
    lines: list[str] = ["---", "**User's Current Data:**"]

    if snapshot.stats:
        s = snapshot.stats
        lines += [
            "",
            "**Performance Stats:**",
            f"- Calls this week: {s.calls_this_week}",
            f"- Leads contacted: {s.leads_contacted}",
            f"- Qualified leads: {s.qualified_leads}",
            f"- Connection rate: {s.connection_rate:.1f}%",
        ]

    if snapshot.leads:
        lines += ["", f"**Active Leads ({len(snapshot.leads)}):**"]
        for lead in snapshot.leads[:MAX_LEADS]:
            line = f"- {lead.company_name} ({lead.contact_name}) - {lead.status}"
            if lead.fit_score:
                line += f" [Fit: {lead.fit_score}%]"
            lines.append(line)

    if snapshot.calls:
        lines += ["", f"**Recent Calls ({len(snapshot.calls)}):**"]
        for call in snapshot.calls[:MAX_CALLS]:
            line = f"- {call.created_at}: {call.disposition or 'unknown'}"
            if call.duration:
                line += f" ({round(call.duration / 60)}min)"
            lines.append(line)

    if snapshot.team:
        t = snapshot.team
        lines += [
            "",
            "**Team Overview:**",
            f"- Total SDRs: {t.total_sdrs}",
            f"- Total Leads: {t.total_leads}",
            f"- Top Performer: {t.top_performer or 'N/A'}",
        ]

    return "\n".join(lines)


def inject_activity(message: str, snapshot: ActivitySnapshot | None) -> str:
    """Append the rendered snapshot to a task message (no-op for empty snapshots)."""
    if snapshot is None or snapshot.is_empty():
        return message
    return f"{message}\n\n{render_activity_snapshot(snapshot)}"
