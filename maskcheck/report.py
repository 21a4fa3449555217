from __future__ import annotations

from typing import List

from .model import Duplicate, Finding, ScanResult


def summarize_duplicates(duplicates: List[Duplicate]) -> str:
	if not duplicates:
		return "No masked names."
	parts: List[str] = [f"{len(duplicates)} masked names:"]
	for d in duplicates:
		parts.append(f"  {d.name}: {' > '.join(d.scopes)}")
	return "\n".join(parts)


def summarize_findings(label: str, findings: List[Finding]) -> str:
	parts: List[str] = [f"{label} ({len(findings)} lines)"]
	for f in findings:
		parts.append(f"  {f.line_number}: {f.masked_name} | {f.line.strip()}")
	return "\n".join(parts)


def summarize_result(result: ScanResult) -> str:
	if not result.problems:
		if not result.masked_names:
			return "No masking problems found."
		return (
			f"No masking problems found in {result.sources_scanned} sources"
			f" ({len(result.masked_names)} masked names)"
		)
	blocks = [summarize_findings(label, result.findings[label]) for label in result.findings]
	total = sum(len(f) for f in result.findings.values())
	blocks.append(f"{total} possible masking problems in {len(result.findings)} of {result.sources_scanned} sources")
	return "\n\n".join(blocks)
