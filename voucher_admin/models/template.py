import re
from enum import Enum
from typing import Optional, Union
from voucher_admin.errors import ValidationError


class VoucherTemplate(str, Enum):
    """Closed set of voucher layouts the rendering step knows how to draw"""

    TEMPLATE1 = "Template1"
    TEMPLATE2 = "Template2"
    TEMPLATE3 = "Template3"
    TEMPLATE4 = "Template4"
    TEMPLATE5 = "Template5"


DEFAULT_TEMPLATE = VoucherTemplate.TEMPLATE1


def normalize_template(value: Optional[Union[str, VoucherTemplate]]) -> VoucherTemplate:
    """
    Resolve any spelling of a template key to its canonical variant.

    'template1', 'TEMPLATE1', 'Template 1' and '1' all map to Template1.
    An empty value falls back to the default template.
    """
    if isinstance(value, VoucherTemplate):
        return value
    if value is None or not str(value).strip():
        return DEFAULT_TEMPLATE

    number = re.sub(r"\D", "", str(value))
    if number:
        number = str(int(number))
    try:
        return VoucherTemplate(f"Template{number}")
    except ValueError:
        raise ValidationError(
            f"Unknown voucher template: {value!r}",
            fields={"template": "Please select a template between Template1 and Template5"},
        )
