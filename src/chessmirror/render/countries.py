"""Numeric country ids used by the source site, mapped to ISO 3166 alpha-2."""

from __future__ import annotations

NUMERIC_COUNTRY_CODES: dict[str, str] = {
    "1": "af",  # Afghanistan
    "2": "us",  # United States
    "3": "al",  # Albania
    "4": "dz",  # Algeria
    "5": "ad",  # Andorra
    "6": "ao",  # Angola
    "7": "ar",  # Argentina
    "8": "am",  # Armenia
    "9": "aw",  # Aruba
    "10": "at",  # Austria
    "11": "au",  # Australia
    "12": "az",  # Azerbaijan
    "13": "bs",  # Bahamas
    "14": "bh",  # Bahrain
    "15": "bd",  # Bangladesh
    "16": "by",  # Belarus
    "17": "be",  # Belgium
    "18": "bz",  # Belize
    "19": "bo",  # Bolivia
    "20": "ba",  # Bosnia
    "21": "bw",  # Botswana
    "22": "br",  # Brazil
    "23": "bn",  # Brunei
    "24": "bg",  # Bulgaria
    "25": "kh",  # Cambodia
    "26": "cm",  # Cameroon
    "27": "ca",  # Canada
    "28": "cl",  # Chile
    "29": "cn",  # China
    "30": "co",  # Colombia
    "31": "cr",  # Costa Rica
    "32": "hr",  # Croatia
    "33": "cu",  # Cuba
    "34": "cy",  # Cyprus
    "35": "cz",  # Czech Republic
    "36": "dk",  # Denmark
    "37": "do",  # Dominican Republic
    "38": "ec",  # Ecuador
    "39": "eg",  # Egypt
    "40": "sv",  # El Salvador
    "41": "ee",  # Estonia
    "42": "et",  # Ethiopia
    "43": "fo",  # Faroe Islands
    "44": "fi",  # Finland
    "45": "fr",  # France
    "46": "ge",  # Georgia
    "47": "de",  # Germany
    "48": "gh",  # Ghana
    "49": "gr",  # Greece
    "50": "gt",  # Guatemala
    "51": "hn",  # Honduras
    "52": "hk",  # Hong Kong
    "53": "hu",  # Hungary
    "54": "is",  # Iceland
    "55": "in",  # India
    "56": "id",  # Indonesia
    "57": "ir",  # Iran
    "58": "iq",  # Iraq
    "59": "ie",  # Ireland
    "60": "il",  # Israel
    "61": "it",  # Italy
    "62": "ci",  # Ivory Coast
    "63": "jm",  # Jamaica
    "64": "jp",  # Japan
    "65": "jo",  # Jordan
    "66": "kz",  # Kazakhstan
    "67": "ke",  # Kenya
    "68": "kw",  # Kuwait
    "69": "in",  # India
    "70": "lv",  # Latvia
    "71": "lb",  # Lebanon
    "72": "ly",  # Libya
    "73": "lt",  # Lithuania
    "74": "lu",  # Luxembourg
    "75": "mo",  # Macau
    "76": "mk",  # North Macedonia
    "77": "mg",  # Madagascar
    "78": "mw",  # Malawi
    "79": "my",  # Malaysia
    "80": "mt",  # Malta
    "81": "mu",  # Mauritius
    "82": "mx",  # Mexico
    "83": "md",  # Moldova
    "84": "mc",  # Monaco
    "85": "mn",  # Mongolia
    "86": "me",  # Montenegro
    "87": "ma",  # Morocco
    "88": "mz",  # Mozambique
    "89": "mm",  # Myanmar
    "90": "na",  # Namibia
    "91": "np",  # Nepal
    "92": "nl",  # Netherlands
    "93": "nz",  # New Zealand
    "94": "ni",  # Nicaragua
    "95": "ng",  # Nigeria
    "96": "kp",  # North Korea
    "97": "no",  # Norway
    "98": "om",  # Oman
    "99": "pk",  # Pakistan
    "100": "ps",  # Palestine
    "101": "pa",  # Panama
    "102": "py",  # Paraguay
    "103": "pe",  # Peru
    "104": "ph",  # Philippines
    "105": "pl",  # Poland
    "106": "pt",  # Portugal
    "107": "pr",  # Puerto Rico
    "108": "qa",  # Qatar
    "109": "ro",  # Romania
    "110": "ru",  # Russia
    "111": "rw",  # Rwanda
    "112": "sa",  # Saudi Arabia
    "113": "sn",  # Senegal
    "114": "rs",  # Serbia
    "115": "sg",  # Singapore
    "116": "sk",  # Slovakia
    "117": "si",  # Slovenia
    "118": "so",  # Somalia
    "119": "za",  # South Africa
    "120": "kr",  # South Korea
    "121": "es",  # Spain
    "122": "lk",  # Sri Lanka
    "123": "sd",  # Sudan
    "124": "sr",  # Suriname
    "125": "se",  # Sweden
    "126": "ch",  # Switzerland
    "127": "sy",  # Syria
    "128": "tw",  # Taiwan
    "129": "tj",  # Tajikistan
    "130": "tz",  # Tanzania
    "131": "th",  # Thailand
    "132": "tt",  # Trinidad and Tobago
    "133": "tn",  # Tunisia
    "134": "tr",  # Turkey
    "135": "tm",  # Turkmenistan
    "136": "ug",  # Uganda
    "137": "ua",  # Ukraine
    "138": "ae",  # UAE
    "139": "gb",  # United Kingdom
    "140": "uy",  # Uruguay
    "141": "uz",  # Uzbekistan
    "142": "ve",  # Venezuela
    "143": "vn",  # Vietnam
    "144": "ye",  # Yemen
    "145": "zm",  # Zambia
    "146": "zw",  # Zimbabwe
    "147": "xk",  # Kosovo
    "148": "sc",  # Seychelles
    "149": "ag",  # Antigua and Barbuda
    "150": "bb",  # Barbados
    "151": "bj",  # Benin
    "152": "bt",  # Bhutan
    "153": "bf",  # Burkina Faso
    "154": "bi",  # Burundi
    "155": "cv",  # Cape Verde
    "156": "cf",  # Central African Republic
    "157": "td",  # Chad
    "158": "km",  # Comoros
    "159": "cg",  # Congo
    "160": "cd",  # DR Congo
    "161": "dj",  # Djibouti
    "162": "dm",  # Dominica
    "163": "gq",  # Equatorial Guinea
    "164": "er",  # Eritrea
    "165": "sz",  # Eswatini
    "166": "fj",  # Fiji
    "167": "ga",  # Gabon
    "168": "gm",  # Gambia
    "169": "gd",  # Grenada
    "170": "gn",  # Guinea
    "171": "gw",  # Guinea-Bissau
    "172": "gy",  # Guyana
    "173": "ht",  # Haiti
    "174": "ki",  # Kiribati
    "175": "la",  # Laos
    "176": "ls",  # Lesotho
    "177": "lr",  # Liberia
    "178": "li",  # Liechtenstein
    "179": "mv",  # Maldives
    "180": "ml",  # Mali
    "181": "mh",  # Marshall Islands
    "182": "mr",  # Mauritania
    "183": "fm",  # Micronesia
    "184": "nr",  # Nauru
    "185": "ne",  # Niger
    "186": "pw",  # Palau
    "187": "pg",  # Papua New Guinea
    "188": "ws",  # Samoa
    "189": "sm",  # San Marino
    "190": "st",  # Sao Tome and Principe
    "191": "sl",  # Sierra Leone
    "192": "sb",  # Solomon Islands
    "193": "ss",  # South Sudan
    "194": "kn",  # Saint Kitts and Nevis
    "195": "lc",  # Saint Lucia
    "196": "vc",  # Saint Vincent
    "197": "tg",  # Togo
    "198": "to",  # Tonga
    "199": "tv",  # Tuvalu
    "200": "vu",  # Vanuatu
}


def iso_country_code(code: str | None) -> str | None:
    """Normalise a numeric or alpha-2 country id to lowercase alpha-2."""
    if not code:
        return None
    value = code.strip().lower()
    if value.isdigit():
        value = NUMERIC_COUNTRY_CODES.get(value, "")
    if len(value) == 2 and value.isascii() and value.isalpha():
        return value
    return None


def flag_emoji(code: str | None) -> str:
    """Regional-indicator flag for *code*, or an empty string."""
    iso = iso_country_code(code)
    if iso is None:
        return ""
    return "".join(chr(0x1F1E6 + ord(ch) - ord("a")) for ch in iso)
