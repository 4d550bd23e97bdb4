"""
Spec Parser
Extracts product specifications from legacy WooCommerce HTML

The legacy store keeps specifications in a table inside each product's
short_description. Four layouts exist:
- Light commercial: <center> wrapper, <strong> labels without colons
- Commercial: <strong> labels with colons
- Art panels: <b> labels, Length/Height instead of Sizes
- Packages/accessories: no table, text in the full description
"""
import re
import secrets
import time
from typing import Dict, Optional, Set

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

# Label is inserted as a regex fragment; value is capture group 1
VALUE_PATTERNS = (
    r"<strong>{label}:?</strong>[\s\S]*?</td>[\s\S]*?<td[^>]*>[\s\S]*?<span[^>]*color:[^>]*#003366[^>]*>([^<]+)</span>",
    r"<strong>{label}:?</strong>[\s\S]*?</td>[\s\S]*?<td[^>]*>[\s\S]*?<span[^>]*>([^<]+)</span>",
    r"<b>{label}:?</b>[\s\S]*?</td>[\s\S]*?<td[^>]*>[\s\S]*?<span[^>]*color:[^>]*#003366[^>]*>([^<]+)</span>",
    r"<b>{label}:?</b>[\s\S]*?</td>[\s\S]*?<td[^>]*>[\s\S]*?<span[^>]*>([^<]+)</span>",
    r"<(?:strong|b)>{label}:?</(?:strong|b)>[\s\S]*?</td>[\s\S]*?<td[^>]*>\s*([^<\s][^<]*)\s*</td>",
)

DESCRIPTION_PATTERN = re.compile(
    r"<span[^>]*font-size:\s*medium[^>]*>[\s\S]*?"
    r"(This[^<]+(?:commercial|inflatable|bouncer|slide|design|feature|quality|vinyl|grade|durable)[^<]*)</span>",
    re.IGNORECASE,
)


def clean_value(value: str) -> str:
    value = (
        value.strip()
        .replace("&#8242;", "'")
        .replace("&#8243;", '"')
        .replace("&nbsp;", " ")
        .replace("&amp;", "&")
    )
    return re.sub(r"\s+", " ", value).strip()


def extract_table_value(html: str, label: str) -> Optional[str]:
    """First non-empty value found for `label` (a regex fragment)"""
    for pattern in VALUE_PATTERNS:
        match = re.search(pattern.format(label=label), html, re.IGNORECASE)
        if match and match.group(1):
            value = clean_value(match.group(1))
            if value:
                return value
    return None


def _to_int(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    match = re.match(r"\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else None


def _to_float(value: Optional[str]) -> Optional[float]:
    """Float from the digits and dots of a value ("1,250 lbs" -> 1250.0)"""
    if not value:
        return None
    digits = re.sub(r"[^\d.]", "", value)
    match = re.match(r"\d*\.?\d+|\d+", digits)
    return float(match.group(0)) if match else None


def parse_specs(html: Optional[str]) -> Dict:
    """
    Parse the specification table of a WooCommerce product

    Returns:
        Dict with only the keys that were found: model_number, size, weight,
        warranty, pieces, blowers, operators, riders, indoor, outdoor, power,
        voltage, frequency, phase, rpm, amps, clean_description
    """
    specs: Dict = {}
    if not html:
        return specs

    def value(*labels: str) -> Optional[str]:
        for label in labels:
            found = extract_table_value(html, label)
            if found:
                return found
        return None

    model_number = value("Model #", "Item #")
    if model_number:
        specs['model_number'] = model_number

    size = value("Sizes?", "Size")
    if not size:
        length = value("Length")
        height = value("Height")
        if length and height:
            size = f"{length} L x {height} H"
        else:
            size = length or height
    if size:
        specs['size'] = size

    weight = _to_float(value(r"Weight \(lbs\)"))
    if weight is not None:
        specs['weight'] = weight

    warranty = value("Warranty")
    if warranty:
        specs['warranty'] = warranty

    for field, label in (("pieces", "Pieces"), ("blowers", "Blowers"), ("operators", "Operators")):
        number = _to_int(value(label))
        if number is not None:
            specs[field] = number

    riders = value("Riders", "Players")
    if riders:
        specs['riders'] = riders

    for field, label in (("indoor", "Indoor"), ("outdoor", "Outdoor")):
        flag = value(label)
        if flag:
            specs[field] = flag.lower() == "yes"

    for field, label in (
        ("power", "Power"),
        ("voltage", "Voltage"),
        ("frequency", "Frequency"),
        ("phase", "Phase"),
    ):
        text = value(label)
        if text:
            specs[field] = text

    rpm = value(r"R\.P\.M\.")
    if rpm:
        digits = re.sub(r"[^\d]", "", rpm)
        if digits:
            specs['rpm'] = int(digits)

    amps = _to_float(value("AMPS"))
    if amps is not None:
        specs['amps'] = amps

    description = DESCRIPTION_PATTERN.search(html)
    if description:
        specs['clean_description'] = clean_value(description.group(1))

    return specs


def strip_html(html: Optional[str]) -> str:
    if not html:
        return ""
    text = re.sub(r"<[^>]*>", " ", html)
    text = text.replace("&nbsp;", " ")
    text = re.sub(r"&#\d+;", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def generate_slug(name: str, existing: Set[str]) -> str:
    """URL slug for `name`, suffixed -1, -2, ... until unused; reserves it in `existing`"""
    base_slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")

    slug = base_slug
    counter = 1
    while slug in existing:
        slug = f"{base_slug}-{counter}"
        counter += 1

    existing.add(slug)
    return slug


def generate_sku(sku: Optional[str], existing: Set[str]) -> str:
    """Unique SKU; an empty one becomes WC-<epoch_ms>-<random>. Reserves it in `existing`"""
    if not sku:
        random_part = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(6))
        sku = f"WC-{int(time.time() * 1000)}-{random_part}"

    final_sku = sku
    counter = 1
    while final_sku in existing:
        final_sku = f"{sku}-{counter}"
        counter += 1

    existing.add(final_sku)
    return final_sku
