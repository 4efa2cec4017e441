"""Default extraction rules, equivalence groups and token dictionaries.

Each rule describes one manufacturer numbering scheme as a regex with named
groups. Group names the calculators understand:

    series / family   product lineage (required)
    device            device number within a family (MCU)
    positions         contact count (connectors)
    pitch             contact pitch in mm (connectors)
    mount             mounting style code (connectors)
    color             color or color-temperature code (LEDs)
    bin               brightness/flux bin, not a functional difference
    memory, pins      flash size / pin-count code (MCU)
    package, grade    package and temperature grade
    variant, plating  cosmetic variant codes

Patterns are matched against normalized (upper-case, trimmed) MPNs with
``fullmatch``.
"""

import re
from functools import lru_cache

from .patterns import ExtractionRule, PatternRegistry
from .taxonomy import ComponentType as CT


def _rule(category, pattern, prefixes=(), critical=(), name=""):
    return ExtractionRule(
        category=category,
        pattern=re.compile(pattern, re.IGNORECASE),
        prefixes=tuple(prefixes),
        critical=frozenset(critical),
        name=name or category.tag,
    )


# ============================================================================
# Connectors
# ============================================================================

CONNECTOR_RULES: list[ExtractionRule] = [
    # Wurth WR-PHD pin headers: 6130 02 1 1 121 (series, pins, rows, mount, variant).
    # Pin count is fixed per part, so a mismatch is not a substitute.
    _rule(
        CT.CONNECTOR_WURTH,
        r'(?P<series>6[12]\d{2})(?P<positions>\d{2})(?P<rows>\d)(?P<mount>\d)(?P<variant>\d{3})',
        prefixes=("61", "62"), critical=("positions",), name="wurth_wr_phd",
    ),
    # Molex catalog numbers: 53047-0210, 0530470210
    _rule(
        CT.CONNECTOR_MOLEX,
        r'0?(?P<series>\d{5})-?(?P<positions>\d{2})(?P<variant>\d{2})',
        name="molex_catalog",
    ),
    # Molex KK 254 legacy numbers: 22-23-2021
    _rule(
        CT.CONNECTOR_MOLEX,
        r'(?P<series>\d{2}-\d{2})-(?P<style>\d)(?P<positions>\d{2})(?P<plating>\d)',
        name="molex_kk",
    ),
    # TE dash numbers: 282836-2, 1-284392-0, TE5-520196-2
    _rule(
        CT.CONNECTOR_TE,
        r'(?:TE)?(?:(?P<prefix>\d{1,2})-)?(?P<series>\d{5,7})-(?P<variant>\d{1,2})',
        prefixes=("TE",), name="te_dash",
    ),
    # JST shrouded headers: B2B-PH-K-S, S4B-XH-A, SM04B-SRSS-TB
    _rule(
        CT.CONNECTOR_JST,
        r'(?P<mount>SM|S|B)?(?P<positions>\d{1,2})B-(?P<series>[A-Z]{2,4})(?:-(?P<variant>[A-Z0-9()-]+))?',
        prefixes=("SM", "S", "B"), name="jst_header",
    ),
    # JST housings: PHR-2, XHP-4, SHR-04V-S-B
    _rule(
        CT.CONNECTOR_JST,
        r'(?P<series>PH|XH|ZH|SH|GH|EH|VH|PA)(?P<style>[RP])-(?P<positions>\d{1,2})V?(?:-(?P<variant>[A-Z0-9-]+))?',
        prefixes=("PH", "XH", "ZH", "SH", "GH", "EH", "VH", "PA"), name="jst_housing",
    ),
    # Hirose board-to-board / wire-to-board: DF13-2P-1.25DSA, FH12-10S-0.5SH(55)
    _rule(
        CT.CONNECTOR_HIROSE,
        r'(?P<series>(?:DF|FH|BM|HR|ZX)\d{1,3}[A-Z]?)-(?P<positions>\d{1,3})(?P<gender>D?[PS])-'
        r'(?P<pitch>\d+(?:\.\d+)?)(?P<variant>[A-Z][A-Z0-9()]*)?',
        prefixes=("DF", "FH", "BM", "HR", "ZX"), name="hirose_df",
    ),
    # Hirose RF: U.FL-R-SMT-1(10)
    _rule(
        CT.CONNECTOR_HIROSE,
        r'(?P<series>[UWX]\.FL)-(?P<variant>[A-Z0-9().-]+)',
        prefixes=("U.FL", "W.FL", "X.FL"), name="hirose_rf",
    ),
    # Amphenol ICC/FCI: 10118194-0001LF, 20021121-00010C4LF
    _rule(
        CT.CONNECTOR_AMPHENOL,
        r'(?P<series>\d{8})-(?P<variant>[0-9A-Z]+?)(?P<plating>LF)?',
        name="amphenol_icc",
    ),
    # Amphenol RJ jacks: RJHSE-5380
    _rule(
        CT.CONNECTOR_AMPHENOL,
        r'(?P<series>RJHSE|RJE|RJMG)-?(?P<variant>[0-9A-Z]+)',
        prefixes=("RJHSE", "RJE", "RJMG"), name="amphenol_rj",
    ),
    # Harwin: M20-9990245 (series, style, positions, finish)
    _rule(
        CT.CONNECTOR_HARWIN,
        r'(?P<series>M\d{2})-(?P<style>\d{3})(?P<positions>\d{2})(?P<variant>\d{2})',
        prefixes=("M",), name="harwin_m",
    ),
]

# Pitch (mm) by series, for schemes that don't encode it in the MPN
CONNECTOR_PITCH: dict[str, str] = {
    # TE terminal blocks and headers
    "282836": "5.00",
    "282837": "5.08",
    "282838": "7.50",
    "282842": "10.00",
    "284392": "2.54",
    # Wurth WR-PHD
    "6130": "2.54",
    "6200": "2.00",
    "6220": "1.27",
    # Molex
    "53047": "1.25",
    "53048": "1.25",
    "53261": "1.25",
    "22-23": "2.54",
    # JST
    "PH": "2.00",
    "XH": "2.50",
    "ZH": "1.50",
    "SH": "1.00",
    "GH": "1.25",
    "GHS": "1.25",
    "EH": "2.50",
    "VH": "3.96",
    "SRSS": "1.00",
    # Harwin
    "M20": "2.54",
    "M22": "2.00",
    "M50": "1.27",
    "M80": "2.00",
}

# Mount codes, keyed "<manufacturer>:<code>"
CONNECTOR_MOUNT: dict[str, str] = {
    "Wurth Elektronik:1": "THT",
    "Wurth Elektronik:2": "SMD",
    "Wurth Elektronik:3": "Press-Fit",
    "Wurth Elektronik:4": "SMD/THT",
    "JST:B": "THT",
    "JST:S": "THT",
    "JST:SM": "SMD",
}


# ============================================================================
# LEDs
# ============================================================================

LED_RULES: list[ExtractionRule] = [
    # Vishay: TLHR5400 (series TLHR540, bin 0)
    _rule(
        CT.LED_VISHAY,
        r'(?P<series>TL[HW][A-Z]\d{3})(?P<bin>\d)(?P<package>[A-Z-]*)',
        prefixes=("TLH", "TLW"), name="vishay_tlh",
    ),
    # Cree XLamp: XPERED-L1-FKA, XPGDWT-L1-0000-00H51
    _rule(
        CT.LED_CREE,
        r'(?P<series>X[A-Z0-9]{3,7})-(?P<package>[A-Z]\d)'
        r'(?:-(?P<color>F[A-Z])(?P<bin>[A-Z0-9]*))?(?:-(?P<variant>[A-Z0-9-]+))?',
        prefixes=("X",), name="cree_xlamp",
    ),
    # Cree through-hole / PLCC: CLVBA-FKA
    _rule(
        CT.LED_CREE,
        r'(?P<series>CL[A-Z0-9]{2,4})-(?P<color>F[A-Z])(?P<bin>[A-Z0-9]*)',
        prefixes=("CL",), name="cree_clv",
    ),
    # Lumileds LUXEON mid-power: L130-5580CT (series, CCT, CRI, bin)
    _rule(
        CT.LED_LUMILEDS,
        r'(?P<series>L1\d{2})-(?P<color>\d{2})(?P<cri>\d{2})(?P<bin>[A-Z0-9]*)',
        prefixes=("L1",), name="lumileds_luxeon_mp",
    ),
    # Lumileds LUXEON Rebel: LXML-PWC1-0100
    _rule(
        CT.LED_LUMILEDS,
        r'(?P<series>LX[A-Z0-9]{2})-(?P<color>P[A-Z]{2})(?P<model>\d)-(?P<bin>\d{4})',
        prefixes=("LX",), name="lumileds_rebel",
    ),
    # LG Innotek: LG R971-KN (checked before Osram, which shares "LG")
    _rule(
        CT.LED_LG,
        r'(?P<series>LG ?[RGBYW]\d{3})(?:-(?P<bin>[A-Z0-9]{1,3}))?',
        prefixes=("LG ",), name="lg_innotek",
    ),
    # Osram TOPLED: LW E67C, LCW E6SF-AB (color, package family, bin)
    _rule(
        CT.LED_OSRAM,
        r'(?P<color>LC?[WRGBYTAS]) ?(?P<series>[A-Z]\d[A-Z0-9][A-Z])(?:-(?P<bin>[A-Z0-9-]+))?',
        prefixes=("LW", "LCW", "LR", "LS", "LY", "LA", "LT", "LB", "LG"), name="osram_topled",
    ),
    # Samsung mid-power: LM301B, LM281B-V2, LH351D
    _rule(
        CT.LED_SAMSUNG,
        r'(?P<series>L[MH][2-5]\d1[A-Z])(?:-(?P<bin>[A-Z0-9]{1,3}))?',
        prefixes=("LM", "LH"), name="samsung_lm",
    ),
    # Nichia: NCSW170AT, NSPW500DS
    _rule(
        CT.LED_NICHIA,
        r'(?P<series>N[CS][SPL][WRGBEY]\d{3})(?P<bin>[A-Z0-9]{0,4})',
        prefixes=("NC", "NS"), name="nichia",
    ),
    # Kingbright: WP7113ID, APT1608SGC
    _rule(
        CT.LED_KINGBRIGHT,
        r'(?P<series>(?:WP|APTD|APT|AP|KP|AA)\d{3,4})'
        r'(?P<color>SURC|SRD|SGD|SYD|SGC|ZGC|SEC|SRC|QBC|PBC|SYK|ID|GD|YD|HD|EC|BC)'
        r'(?P<bin>[A-Z0-9/-]*)',
        prefixes=("WP", "AP", "KP", "AA"), name="kingbright",
    ),
]

# Color / color-temperature codes -> semantic class. Codes mapping to
# different classes are never substitutes.
LED_COLOR_CLASS: dict[str, str] = {
    # Cree color-temperature groups
    "FA": "neutral-white",
    "FC": "cool-white",
    "FK": "warm-white",
    # Lumileds CCT (first two digits of the code)
    "27": "2700K",
    "30": "3000K",
    "35": "3500K",
    "40": "4000K",
    "50": "5000K",
    "55": "5500K",
    "57": "5700K",
    "65": "6500K",
    "PWC": "cool-white",
    "PWN": "neutral-white",
    "PWW": "warm-white",
    # Osram color prefixes
    "LW": "white",
    "LCW": "white",
    "LR": "red",
    "LS": "super-red",
    "LY": "yellow",
    "LA": "amber",
    "LT": "true-green",
    "LG": "green",
    "LB": "blue",
    # Kingbright color suffixes
    "ID": "red",
    "HD": "red",
    "SRD": "red",
    "SRC": "red",
    "SURC": "red",
    "EC": "red",
    "SEC": "red",
    "GD": "green",
    "SGD": "green",
    "SGC": "green",
    "ZGC": "green",
    "YD": "yellow",
    "SYD": "yellow",
    "SYK": "yellow",
    "BC": "blue",
    "PBC": "blue",
    "QBC": "blue",
}

# Same physical part family under different names
LED_EQUIVALENTS: dict[str, list[str]] = {
    "vishay-tlh-red": ["TLHR5400", "TLHR5401", "TLHR5402", "TLHR5403"],
    "vishay-tlh-green": ["TLHG5800", "TLHG5801", "TLHG5802", "TLHG5803"],
    "vishay-tlh-blue": ["TLHB5800", "TLHB5801", "TLHB5802", "TLHB5803"],
    "osram-e6-white": ["LW E67C", "LW E6SF", "LCW E6SF"],
    "osram-e6-red": ["LR E67C", "LR E6SF"],
    "osram-e6-super-red": ["LS E67C", "LS E6SF"],
    "osram-e6-yellow": ["LY E67C", "LY E6SF"],
    "cree-xpe2-red": ["XPERED-L1", "XPERED-L1-0000", "XPERED-L1-R250"],
    "cree-xpg3-white": ["XPGDWT-L1", "XPGDWT-L1-0000", "XPG3WT-L1"],
    "nichia-170-white": ["NCSW170", "NCSW170T", "NCSW170AT"],
    "mid-power-3030": ["LM301B", "LM301H", "L130", "L135"],
    "mid-power-2835": ["LM281B", "L128"],
}


# ============================================================================
# Microcontrollers
# ============================================================================

# STM32 ordering code layout, shared by pin-compatible clones
_STM32_LAYOUT = (
    r'(?P<family>{prefix}(?:[A-Z]\d|W[BL]))(?P<device>\d{{2}}[A-Z]?)(?P<pins>[A-Z])(?P<memory>[0-9A-Z])'
    r'(?:(?P<package>[A-Z])(?P<grade>\d)(?P<variant>[A-Z0-9]*))?'
)

MCU_RULES: list[ExtractionRule] = [
    # AVR: ATMEGA328P-AU, ATTINY85-20PU, ATXMEGA128A4U
    _rule(
        CT.MICROCONTROLLER_ATMEL,
        r'(?P<family>ATMEGA|ATTINY|ATXMEGA)(?P<device>\d{1,4})(?P<variant>[A-Z][A-Z0-9]*)?'
        r'(?:-(?P<package>[A-Z0-9]+))?',
        prefixes=("ATMEGA", "ATTINY", "ATXMEGA"), name="avr",
    ),
    # SAM: ATSAMD21G18A-AU
    _rule(
        CT.MICROCONTROLLER_ATMEL,
        r'(?P<family>ATSAM[A-Z]\d{2})(?P<pins>[A-Z])(?P<memory>\d{2})(?P<variant>[A-Z])?'
        r'(?:-(?P<package>[A-Z0-9]+))?',
        prefixes=("ATSAM",), name="sam",
    ),
    _rule(CT.MICROCONTROLLER_ST, _STM32_LAYOUT.format(prefix="STM32"), prefixes=("STM32",), name="stm32"),
    # STM8S003F3P6
    _rule(
        CT.MICROCONTROLLER_ST,
        r'(?P<family>STM8[A-Z])(?P<device>\d{3})(?P<pins>[A-Z])(?P<memory>\d)'
        r'(?:(?P<package>[A-Z])(?P<grade>\d)(?P<variant>[A-Z]*))?',
        prefixes=("STM8",), name="stm8",
    ),
    _rule(CT.MICROCONTROLLER_GIGADEVICE, _STM32_LAYOUT.format(prefix="GD32"), prefixes=("GD32",), name="gd32"),
    _rule(CT.MICROCONTROLLER_GEEHY, _STM32_LAYOUT.format(prefix="APM32"), prefixes=("APM32",), name="apm32"),
    _rule(CT.MICROCONTROLLER_WCH, _STM32_LAYOUT.format(prefix="CH32"), prefixes=("CH32",), name="ch32"),
    # PIC: PIC16F877A-I/P, PIC32MX795F512L-80I/PT, DSPIC33FJ128GP802
    _rule(
        CT.MICROCONTROLLER_MICROCHIP,
        r'(?P<family>(?:DS)?PIC\d{2})(?P<variant>[A-Z]{1,2})(?P<device>\d{2,4}[A-Z]?)'
        r'(?P<memory>[A-Z]{1,2}\d{2,4}[A-Z]?)?(?:-(?P<grade>[A-Z0-9]+)(?:/(?P<package>[A-Z0-9]+))?)?',
        prefixes=("PIC", "DSPIC"), name="pic",
    ),
    # MSP430G2553IPW20R, MSP430FR2433IRGER
    _rule(
        CT.MICROCONTROLLER_TI,
        r'(?P<family>MSP43[02])(?P<variant>[A-Z]{1,2})(?P<device>\d{3,4}[A-Z]?)'
        r'(?P<package>I[A-Z]{1,3}\d{0,3}[RT]?)?',
        prefixes=("MSP",), name="msp430",
    ),
    # LPC1768FBD100, LPC1114FBD48/302
    _rule(
        CT.MICROCONTROLLER_NXP,
        r'(?P<family>LPC\d{2})(?P<device>[A-Z]?\d{2})(?P<package>F[A-Z]{1,3}\d{2,3})?(?P<variant>[A-Z0-9,/]*)',
        prefixes=("LPC",), name="lpc",
    ),
    # Kinetis: MK20DX256VLH7
    _rule(
        CT.MICROCONTROLLER_NXP,
        r'(?P<family>MK\d{2})(?P<variant>[A-Z]{1,2})(?P<memory>\d{2,4})(?P<package>[A-Z]{3})(?P<grade>\d{1,3})',
        prefixes=("MK",), name="kinetis",
    ),
    # XMC1100T038X0064AA
    _rule(
        CT.MICROCONTROLLER_INFINEON,
        r'(?P<family>XMC\d)(?P<device>\d{3})(?P<package>[A-Z]\d{3})(?P<memory>[A-Z]\d{4})(?P<variant>[A-Z]{2})',
        prefixes=("XMC",), name="xmc",
    ),
    # RL78: R5F100LEAFB
    _rule(
        CT.MICROCONTROLLER_RENESAS,
        r'(?P<family>R5F1\d)(?P<device>[0-9A-Z])(?P<pins>[A-Z])(?P<memory>[A-Z])(?P<grade>[A-Z])(?P<package>[A-Z]{2})',
        prefixes=("R5F",), name="rl78",
    ),
    # RA: R7FA4M1AB3CFM
    _rule(
        CT.MICROCONTROLLER_RENESAS,
        r'(?P<family>R7FA\d[A-Z]\d)(?P<memory>[A-Z]{2})(?P<grade>\d)(?P<variant>[A-Z])(?P<package>[A-Z]{2})',
        prefixes=("R7FA",), name="renesas_ra",
    ),
    # PSoC: CY8C4245AXI-483
    _rule(
        CT.MICROCONTROLLER_CYPRESS,
        r'(?P<family>CY8C\d)(?P<device>\d{3})(?P<package>[A-Z]{2,3})(?P<grade>[A-Z])?-(?P<variant>\d{3})',
        prefixes=("CY8C",), name="psoc",
    ),
    # ESP32-S3-WROOM-1-N16R8, ESP32-WROOM-32E, ESP8266EX
    _rule(
        CT.MICROCONTROLLER_ESPRESSIF,
        r'(?P<family>ESP32|ESP8266|ESP8285)(?:-?(?P<variant>[SCH]\d{1,2}|EX))?'
        r'(?:-(?P<package>(?:WROOM|WROVER|MINI|PICO|SOLO)(?:-\d+[A-Z]?)?))?'
        r'(?:-(?P<memory>[NH]\d+(?:R\d+)?))?',
        prefixes=("ESP",), name="esp",
    ),
]

MCU_EQUIVALENTS: dict[str, list[str]] = {
    "avr": ["ATMEGA", "ATTINY", "ATXMEGA"],
    "sam": ["ATSAMD10", "ATSAMD11", "ATSAMD21", "ATSAMD51", "ATSAME51", "ATSAME54"],
    "pic": ["PIC10", "PIC12", "PIC16", "PIC18", "PIC24", "PIC32", "DSPIC30", "DSPIC33"],
    "msp": ["MSP430", "MSP432"],
    "stm32": [
        "STM32F0", "STM32F1", "STM32F2", "STM32F3", "STM32F4", "STM32F7",
        "STM32G0", "STM32G4", "STM32H7", "STM32L0", "STM32L1", "STM32L4",
        "STM32L5", "STM32U5", "STM32WB", "STM32WL",
    ],
    "stm8": ["STM8S", "STM8L"],
    # Pin-compatible clones
    "stm32f0-compatible": ["STM32F0", "APM32F0"],
    "stm32f1-compatible": ["STM32F1", "GD32F1", "APM32F1", "CH32F1"],
    "stm32f4-compatible": ["STM32F4", "GD32F4", "APM32F4"],
    "lpc": ["LPC11", "LPC13", "LPC15", "LPC17", "LPC18", "LPC43", "LPC54", "LPC55"],
    "kinetis": ["MK02", "MK20", "MK22", "MK64", "MK66"],
    "esp": ["ESP32", "ESP8266", "ESP8285"],
    "rl78": ["R5F10", "R5F11", "R5F12", "R5F13", "R5F14"],
}


def default_rules() -> list[ExtractionRule]:
    return CONNECTOR_RULES + LED_RULES + MCU_RULES


@lru_cache(maxsize=1)
def default_registry() -> PatternRegistry:
    """Build the shared default registry (immutable, built once per process)."""
    return PatternRegistry(
        rules=default_rules(),
        equivalents={
            CT.LED: LED_EQUIVALENTS,
            CT.MICROCONTROLLER: MCU_EQUIVALENTS,
        },
        dictionaries={
            "connector_pitch": CONNECTOR_PITCH,
            "connector_mount": CONNECTOR_MOUNT,
            "led_color_class": LED_COLOR_CLASS,
        },
    )
