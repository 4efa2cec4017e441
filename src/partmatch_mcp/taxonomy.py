"""Component category taxonomy.

Two levels: a base category (e.g. CONNECTOR) and manufacturer refinements
(e.g. CONNECTOR_MOLEX). Each member carries its base explicitly, so
"is-a" checks are an identity test against ``.base``.
"""

import re
from enum import Enum


class ComponentType(Enum):
    """Component category tag.

    Values are ``(tag, base_name, manufacturer)``. Base categories have
    ``base_name`` and ``manufacturer`` set to None.
    """

    # Base categories
    GENERIC = ("generic", None, None)
    RESISTOR = ("resistor", None, None)
    CAPACITOR = ("capacitor", None, None)
    INDUCTOR = ("inductor", None, None)
    DIODE = ("diode", None, None)
    TRANSISTOR = ("transistor", None, None)
    MOSFET = ("mosfet", None, None)
    LED = ("led", None, None)
    MICROCONTROLLER = ("microcontroller", None, None)
    CONNECTOR = ("connector", None, None)
    MEMORY = ("memory", None, None)
    OPAMP = ("opamp", None, None)
    VOLTAGE_REGULATOR = ("voltage_regulator", None, None)
    CRYSTAL = ("crystal", None, None)
    SENSOR = ("sensor", None, None)

    # Connectors
    CONNECTOR_MOLEX = ("connector_molex", "CONNECTOR", "Molex")
    CONNECTOR_TE = ("connector_te", "CONNECTOR", "TE Connectivity")
    CONNECTOR_JST = ("connector_jst", "CONNECTOR", "JST")
    CONNECTOR_HIROSE = ("connector_hirose", "CONNECTOR", "Hirose")
    CONNECTOR_AMPHENOL = ("connector_amphenol", "CONNECTOR", "Amphenol")
    CONNECTOR_HARWIN = ("connector_harwin", "CONNECTOR", "Harwin")
    CONNECTOR_WURTH = ("connector_wurth", "CONNECTOR", "Wurth Elektronik")

    # LEDs
    LED_CREE = ("led_cree", "LED", "Cree")
    LED_LUMILEDS = ("led_lumileds", "LED", "Lumileds")
    LED_OSRAM = ("led_osram", "LED", "Osram")
    LED_SAMSUNG = ("led_samsung", "LED", "Samsung")
    LED_NICHIA = ("led_nichia", "LED", "Nichia")
    LED_VISHAY = ("led_vishay", "LED", "Vishay")
    LED_KINGBRIGHT = ("led_kingbright", "LED", "Kingbright")
    LED_LG = ("led_lg", "LED", "LG Innotek")

    # Microcontrollers
    MICROCONTROLLER_ATMEL = ("microcontroller_atmel", "MICROCONTROLLER", "Atmel")
    MICROCONTROLLER_MICROCHIP = ("microcontroller_microchip", "MICROCONTROLLER", "Microchip")
    MICROCONTROLLER_ST = ("microcontroller_st", "MICROCONTROLLER", "STMicroelectronics")
    MICROCONTROLLER_TI = ("microcontroller_ti", "MICROCONTROLLER", "Texas Instruments")
    MICROCONTROLLER_NXP = ("microcontroller_nxp", "MICROCONTROLLER", "NXP")
    MICROCONTROLLER_INFINEON = ("microcontroller_infineon", "MICROCONTROLLER", "Infineon")
    MICROCONTROLLER_RENESAS = ("microcontroller_renesas", "MICROCONTROLLER", "Renesas")
    MICROCONTROLLER_CYPRESS = ("microcontroller_cypress", "MICROCONTROLLER", "Cypress")
    MICROCONTROLLER_ESPRESSIF = ("microcontroller_espressif", "MICROCONTROLLER", "Espressif")
    MICROCONTROLLER_GIGADEVICE = ("microcontroller_gigadevice", "MICROCONTROLLER", "GigaDevice")
    MICROCONTROLLER_WCH = ("microcontroller_wch", "MICROCONTROLLER", "WCH")
    MICROCONTROLLER_GEEHY = ("microcontroller_geehy", "MICROCONTROLLER", "Geehy")
    # Short-form aliases used by older BOM exports
    MCU_ATMEL = ("mcu_atmel", "MICROCONTROLLER", "Atmel")
    MCU_ST = ("mcu_st", "MICROCONTROLLER", "STMicroelectronics")
    MCU_MICROCHIP = ("mcu_microchip", "MICROCONTROLLER", "Microchip")

    def __init__(self, tag: str, base_name: str | None, manufacturer: str | None):
        self.tag = tag
        self._base_name = base_name
        self.manufacturer = manufacturer

    @property
    def base(self) -> "ComponentType":
        """Base category (self for base categories)."""
        if self._base_name is None:
            return self
        return ComponentType[self._base_name]

    @property
    def is_refinement(self) -> bool:
        return self._base_name is not None

    def is_a(self, other: "ComponentType") -> bool:
        """True if this category equals ``other`` or refines it."""
        return self is other or self.base is other


_SEPARATOR_RE = re.compile(r'[\s,/-]+')


def resolve_category(value) -> ComponentType | None:
    """Resolve a category from an enum member, member name, or tag.

    Accepts forms like ``"CONNECTOR_MOLEX"``, ``"connector_molex"`` and
    ``"connector, Molex"``. Returns None for anything unrecognized,
    including non-string input.
    """
    if isinstance(value, ComponentType):
        return value
    if not isinstance(value, str):
        return None
    key = _SEPARATOR_RE.sub("_", value.strip()).strip("_").upper()
    if not key:
        return None
    try:
        return ComponentType[key]
    except KeyError:
        pass
    # "connector, Molex" -> match by base + manufacturer name
    base_name, _, maker = key.partition("_")
    if maker:
        maker = maker.replace("_", " ")
        for member in ComponentType:
            if (
                member._base_name == base_name
                and member.manufacturer
                and member.manufacturer.upper().startswith(maker)
            ):
                return member
    return None


def base_category(value) -> ComponentType | None:
    """Resolve ``value`` and return its base category."""
    category = resolve_category(value)
    return category.base if category else None


def refinements(base: ComponentType) -> tuple[ComponentType, ...]:
    """All manufacturer refinements of a base category."""
    return tuple(m for m in ComponentType if m.is_refinement and m.base is base)


def base_categories() -> tuple[ComponentType, ...]:
    return tuple(m for m in ComponentType if not m.is_refinement)
