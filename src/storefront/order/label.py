"""Printable shipping label (100 mm x 150 mm HTML).

Two layouts, picked by the order's destination: metro labels carry the
street address for the courier; province labels carry the agency routing
data (district / province / department and the recipient's national ID).
"""

from html import escape

from storefront.catalogue.variant import color_label
from storefront.checkout.pricing import round_money

_PAGE = """<!DOCTYPE html>
<html lang="es">
<head>
<meta charset="utf-8">
<title>Order {code}</title>
<style>
@page {{ size: 100mm 150mm; margin: 0; }}
body {{ width: 100mm; height: 150mm; margin: 0; padding: 5mm; box-sizing: border-box; font-family: sans-serif; font-size: 11pt; }}
h1 {{ font-size: 16pt; margin: 0 0 4mm; }}
dt {{ font-weight: bold; margin-top: 2mm; }}
dd {{ margin: 0; }}
</style>
</head>
<body class="label label-{layout}">
<h1>#{code}</h1>
<dl>
{rows}
</dl>
</body>
</html>
"""


def _rows(pairs) -> str:
    return "\n".join(f"<dt>{escape(name)}</dt><dd>{escape(str(value))}</dd>" for name, value in pairs if value)


def _common_context(order, customer) -> dict:
    colors = ", ".join(f"{qty} {color_label(color)}" for color, qty in order.color_quantities().items())
    return {
        "code": order.short_code,
        "recipient": customer.full_name,
        "phone": customer.phone,
        "units": f"{order.unit_count} ({colors})",
        "amount_due": f"S/ {round_money(order.amount_due or 0.0):.2f}",
    }


class MetroLabelTemplate:
    layout = "metro"

    @staticmethod
    def render(context: dict) -> str:
        rows = _rows(
            [
                ("Destinatario", context["recipient"]),
                ("Teléfono", context["phone"]),
                ("Dirección", context.get("address")),
                ("Referencia", context.get("reference")),
                ("Distrito", context.get("district")),
                ("Unidades", context["units"]),
                ("Por cobrar", context["amount_due"]),
            ]
        )
        return _PAGE.format(code=escape(context["code"]), layout=MetroLabelTemplate.layout, rows=rows)


class ProvinceLabelTemplate:
    layout = "province"

    @staticmethod
    def render(context: dict) -> str:
        rows = _rows(
            [
                ("Destinatario", context["recipient"]),
                ("DNI", context.get("national_id")),
                ("Teléfono", context["phone"]),
                ("Destino", " / ".join(p for p in (context.get("district"), context.get("province"), context.get("department")) if p)),
                ("Agencia", context.get("shipping_address")),
                ("Unidades", context["units"]),
                ("Por cobrar", context["amount_due"]),
            ]
        )
        return _PAGE.format(code=escape(context["code"]), layout=ProvinceLabelTemplate.layout, rows=rows)


LABEL_TEMPLATES: dict[str, type] = {
    MetroLabelTemplate.layout: MetroLabelTemplate,
    ProvinceLabelTemplate.layout: ProvinceLabelTemplate,
}


def render_label(order, customer) -> str:
    context = _common_context(order, customer)
    context.update(
        address=customer.address,
        reference=customer.reference,
        district=customer.district,
        province=customer.province,
        department=customer.department,
        national_id=customer.national_id,
        shipping_address=order.shipping_address,
    )
    template = LABEL_TEMPLATES[order.destination.label_layout]
    return template.render(context)
