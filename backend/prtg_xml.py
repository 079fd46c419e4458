"""PRTG EXE/Script Advanced output and the matching value-lookup file."""
import xml.etree.ElementTree as ET
from typing import Iterable

from sensor_models import MappedStatus, Report, ReportError, ReportResult
from status_codes import DEFAULT_VALUE_LOOKUP, SEVERITIES

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def build_report(mapped: Iterable[MappedStatus], value_lookup: str = DEFAULT_VALUE_LOOKUP) -> Report:
    return Report(results=[
        ReportResult(channel=m.channel, value=m.value, valuelookup=value_lookup)
        for m in mapped
    ])


def error_report(text: str) -> Report:
    return Report(error=ReportError(text=text))


def _to_string(root: ET.Element) -> str:
    ET.indent(root, space="\t")
    return ET.tostring(root, encoding="unicode")


def render_report(report: Report) -> str:
    """Serialize a report as ``<prtg>`` XML, tab indented.

    An error report suppresses all results: PRTG only shows ``<text>`` when
    ``<error>`` is set.
    """
    root = ET.Element("prtg")
    if report.error is not None:
        ET.SubElement(root, "error").text = str(report.error.error)
        ET.SubElement(root, "text").text = report.error.text
        return _to_string(root)

    for result in report.results:
        node = ET.SubElement(root, "result")
        ET.SubElement(node, "channel").text = result.channel
        ET.SubElement(node, "value").text = str(result.value)
        ET.SubElement(node, "valuelookup").text = result.valuelookup
    return _to_string(root)


def render_lookup(value_lookup: str = DEFAULT_VALUE_LOOKUP) -> str:
    # goes to PRTG's lookups/custom folder as <value_lookup>.ovl
    root = ET.Element("ValueLookup", {
        "id": value_lookup,
        "desiredValue": "0",
        "undefinedState": "Warning",
        "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
        "xsi:noNamespaceSchemaLocation": "PaeValueLookups.xsd",
    })
    lookups = ET.SubElement(root, "Lookups")
    for sev in SEVERITIES:
        entry = ET.SubElement(lookups, "SingleInt", {"state": sev.state, "value": str(sev.code)})
        entry.text = sev.label
    return XML_DECLARATION + _to_string(root)
