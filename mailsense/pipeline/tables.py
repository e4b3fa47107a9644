"""Static lookup tables shared by the analysis pipeline.

Everything here is built once at import time and never mutated. Runtime
allow/block lists live in mailsense.core.state instead.
"""

from pathlib import Path
from types import MappingProxyType

# Provider id -> domains. Order matters: the first provider whose domains
# contain the address domain wins. Domain sets are disjoint.
PROVIDERS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        # Global providers
        "gmail": ("gmail.com", "googlemail.com"),
        "outlook": ("outlook.com", "hotmail.com", "live.com", "msn.com"),
        "yahoo": (
            "yahoo.com",
            "yahoo.co.uk",
            "yahoo.co.jp",
            "yahoo.fr",
            "yahoo.de",
            "yahoo.es",
            "yahoo.it",
            "yahoo.ca",
            "yahoo.com.br",
            "yahoo.com.au",
            "yahoo.in",
            "yahoo.co.id",
        ),
        "apple": ("icloud.com", "me.com", "mac.com"),
        "aol": ("aol.com", "aim.com"),
        "proton": ("protonmail.com", "protonmail.ch", "pm.me"),
        # Regional providers
        "mail_ru": ("mail.ru", "inbox.ru", "list.ru", "bk.ru"),
        "yandex": ("yandex.ru", "yandex.com", "ya.ru"),
        "gmx": ("gmx.com", "gmx.de", "gmx.net"),
        "web_de": ("web.de",),
        "qq": ("qq.com",),
        "163": ("163.com", "126.com"),
        "sina": ("sina.com", "sina.cn"),
        "naver": ("naver.com",),
        "daum": ("daum.net", "hanmail.net"),
        # Privacy-focused
        "tutanota": ("tutanota.com", "tutanota.de", "tutamail.com", "tuta.io"),
        "fastmail": ("fastmail.com", "fastmail.fm"),
        "zoho": ("zoho.com", "zohomail.com"),
        "mailfence": ("mailfence.com",),
        "mailbox": ("mailbox.org",),
        # ISP providers
        "comcast": ("comcast.net",),
        "verizon": ("verizon.net",),
        "att": ("att.net",),
        "cox": ("cox.net",),
        "charter": ("charter.net",),
        "earthlink": ("earthlink.net",),
    }
)

# Flattened provider domains, in table order
PROVIDER_DOMAINS: tuple[str, ...] = tuple(d for domains in PROVIDERS.values() for d in domains)

FREE_PROVIDERS = frozenset({"gmail", "yahoo", "outlook", "aol", "proton", "apple"})

# Providers trusted enough to lower the risk score
TRUSTED_PROVIDERS = frozenset({"gmail", "outlook", "yahoo", "apple"})

ROLE_BASED = frozenset(
    {
        "admin",
        "administrator",
        "webmaster",
        "postmaster",
        "hostmaster",
        "info",
        "support",
        "help",
        "contact",
        "sales",
        "marketing",
        "noreply",
        "no-reply",
        "donotreply",
        "do-not-reply",
        "abuse",
        "spam",
        "root",
        "system",
        "null",
        "void",
        "team",
        "staff",
        "office",
        "hello",
        "mail",
        "email",
        "test",
        "testing",
    }
)

TLD_CATEGORIES: MappingProxyType[str, frozenset[str]] = MappingProxyType(
    {
        "generic": frozenset({"com", "net", "org", "info", "biz", "name", "pro"}),
        "sponsored": frozenset({"edu", "gov", "mil", "int", "coop", "museum", "aero"}),
        "country": frozenset({"us", "uk", "ca", "au", "de", "fr", "jp", "cn", "ru", "br", "in"}),
        "new": frozenset({"tech", "online", "site", "xyz", "top", "club", "vip", "shop"}),
    }
)

# Known whole-domain misspellings
DOMAIN_TYPOS: MappingProxyType[str, str] = MappingProxyType(
    {
        "gmial.com": "gmail.com",
        "gmai.com": "gmail.com",
        "gmali.com": "gmail.com",
        "gnail.com": "gmail.com",
        "gmaill.com": "gmail.com",
        "yahooo.com": "yahoo.com",
        "yaho.com": "yahoo.com",
        "yahoo.co": "yahoo.com",
        "homail.com": "hotmail.com",
        "hotmai.com": "hotmail.com",
        "hotmial.com": "hotmail.com",
        "outlok.com": "outlook.com",
        "iclou.com": "icloud.com",
        "icoud.com": "icloud.com",
    }
)

# Trailing-substring TLD misspellings, checked in order
TLD_TYPOS: tuple[tuple[str, str], ...] = (
    (".con", ".com"),
    (".cpm", ".com"),
    (".xom", ".com"),
    (".vom", ".com"),
    (".com.", ".com"),
    (".co,", ".com"),
    (".cok", ".com"),
)


def _load_disposable_domains() -> frozenset[str]:
    """Load disposable domains from file into a frozenset for O(1) lookup."""
    domains_file = Path(__file__).parent / "disposable_domains.txt"
    if not domains_file.exists():
        return frozenset()

    domains = set()
    with open(domains_file) as f:
        for line in f:
            line = line.strip().lower()
            # Skip comments and empty lines
            if line and not line.startswith("#"):
                domains.add(line)
    return frozenset(domains)


# Load disposable domains once at module import
DISPOSABLE_DOMAINS = _load_disposable_domains()
