"""Curated per-country reference tables.

Live advisory and cost APIs are sparse, so these hand-maintained profiles
provide high-confidence safety ratings, cost tiers and etiquette. Tables are
keyed by ISO 3166-1 alpha-2 code and are read-only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from travel_guide.core.types import SafetyRating

Range = Tuple[int, int]


@dataclass(frozen=True)
class CostTiers:
    """Typical daily spend per traveller in USD."""

    budget: Range
    mid_range: Range
    luxury: Range
    accommodation: Tuple[str, str, str]
    food: Tuple[str, str, str]
    transport: Tuple[str, str, str]
    activities: Tuple[str, str, str]
    tips: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CountryProfile:
    code: str
    name: str
    safety_rating: SafetyRating
    safety_summary: str
    concerns: Tuple[str, ...]
    safety_tips: Tuple[str, ...]
    police: str
    ambulance: str
    tourist: str
    health_advice: Tuple[str, ...]
    costs: CostTiers
    etiquette: Tuple[str, ...]
    dress: str
    tipping: str
    greetings: str
    taboos: Tuple[str, ...]
    customs: Tuple[str, ...]
    common_mistakes: Tuple[Tuple[str, str, str], ...] = ()
    best_for: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = ()
    visa_info: Optional[str] = None
    aliases: Tuple[str, ...] = field(default=())


_PROFILES = (
    CountryProfile(
        code="JP",
        name="Japan",
        safety_rating="very-safe",
        safety_summary="Japan is one of the safest countries in the world with very low crime rates.",
        concerns=("Earthquakes and typhoons", "Crowded trains at rush hour"),
        safety_tips=(
            "Download a disaster alert app such as Safety Tips",
            "Keep your passport on you; police may ask for ID",
        ),
        police="110",
        ambulance="119",
        tourist="050-3816-2787 (JNTO visitor hotline)",
        health_advice=(
            "Tap water is safe to drink",
            "Bring prescriptions; some common medicines are restricted",
        ),
        costs=CostTiers(
            budget=(60, 90),
            mid_range=(150, 250),
            luxury=(400, 800),
            accommodation=("$25-50/night", "$100-200/night", "$300-700+/night"),
            food=("$15-25/day", "$40-70/day", "$120-250/day"),
            transport=("$10-20/day", "$20-40/day", "$60-150/day"),
            activities=("$5-15/day", "$20-50/day", "$100-200/day"),
            tips=("A Japan Rail Pass pays off for long-distance trips", "Convenience stores offer cheap quality meals"),
        ),
        etiquette=(
            "Remove shoes when entering homes, temples and ryokan",
            "Queue in an orderly line for trains",
            "Keep phone calls off public transport",
        ),
        dress="Neat, modest clothing; cover tattoos in onsen where required",
        tipping="Tipping is not customary and can cause confusion",
        greetings="A slight bow; handshakes are accepted with foreigners",
        taboos=("Sticking chopsticks upright in rice", "Eating while walking in busy streets"),
        customs=("Gift giving with both hands", "Bathing before entering an onsen"),
        common_mistakes=(
            ("Tipping at restaurants", "Tipping is not part of the culture", "Say 'gochisousama deshita' to thank the staff"),
            ("Relying only on cards", "Many small shops are cash only", "Carry yen and use 7-Eleven ATMs"),
            ("Over-packing the itinerary", "Transit between sights takes longer than expected", "Plan two or three areas per day"),
        ),
        best_for=(
            ("Food Lovers", "From sushi counters to ramen stalls", ("Tsukiji Outer Market", "Dotonbori")),
            ("Culture Enthusiasts", "Temples, shrines and living traditions", ("Kyoto", "Nara")),
            ("First-time Asia Travelers", "Safe, efficient and easy to navigate", ("Tokyo", "Osaka")),
        ),
        visa_info="Visa-free entry for up to 90 days for many nationalities.",
        aliases=("tokyo", "kyoto", "osaka", "hiroshima", "sapporo", "nara"),
    ),
    CountryProfile(
        code="MA",
        name="Morocco",
        safety_rating="moderate",
        safety_summary="Morocco is generally safe, but petty crime and persistent touts are common in tourist areas.",
        concerns=("Pickpocketing in medinas", "Unofficial guides and touts", "Harassment of solo women travelers"),
        safety_tips=("Agree taxi fares before the ride", "Decline unsolicited guides firmly and politely"),
        police="19",
        ambulance="15",
        tourist="177 (Gendarmerie)",
        health_advice=("Drink bottled water", "Protect yourself from strong sun in the desert"),
        costs=CostTiers(
            budget=(30, 50),
            mid_range=(80, 150),
            luxury=(250, 500),
            accommodation=("$15-30/night", "$60-150/night", "$200-500+/night"),
            food=("$8-15/day", "$25-45/day", "$80-150/day"),
            transport=("$5-10/day", "$15-30/day", "$60-120/day"),
            activities=("$5-15/day", "$25-60/day", "$100-250/day"),
            tips=("Haggle in souks; start around a third of the asking price",),
        ),
        etiquette=("Use your right hand for eating and passing items", "Ask before photographing people"),
        dress="Cover shoulders and knees, especially outside beach resorts",
        tipping="Around 10% in restaurants; small change for porters and guides",
        greetings="'Salam alaikum' with a handshake; hand on heart after shaking",
        taboos=("Public displays of affection", "Drinking alcohol in public"),
        customs=("Mint tea as a sign of hospitality", "Friday is the main day of prayer"),
        common_mistakes=(
            ("Accepting directions from strangers", "Many expect payment afterwards", "Use an offline map app in the medina"),
            ("Visiting in peak summer", "Inland cities exceed 40°C", "Travel in spring or autumn"),
        ),
        best_for=(
            ("Adventure Seekers", "Sahara treks and Atlas hikes", ("Merzouga", "Toubkal")),
            ("Photographers", "Blue streets and vivid souks", ("Chefchaouen", "Marrakech")),
        ),
        visa_info="Visa-free for 90 days for many Western nationalities.",
        aliases=("marrakech", "marrakesh", "fes", "fez", "casablanca", "chefchaouen"),
    ),
    CountryProfile(
        code="FR",
        name="France",
        safety_rating="safe",
        safety_summary="France is safe for travelers; pickpocketing is the most common issue in big cities.",
        concerns=("Pickpockets on the Paris metro", "Occasional strikes disrupting transport"),
        safety_tips=("Watch bags near major landmarks", "Check strike schedules before travel days"),
        police="17",
        ambulance="15",
        tourist="112",
        health_advice=("EU travelers should carry an EHIC/GHIC card", "Pharmacies give good basic medical advice"),
        costs=CostTiers(
            budget=(70, 110),
            mid_range=(180, 300),
            luxury=(450, 900),
            accommodation=("$35-70/night", "$130-250/night", "$400-800+/night"),
            food=("$20-35/day", "$50-90/day", "$150-300/day"),
            transport=("$8-15/day", "$20-40/day", "$60-150/day"),
            activities=("$10-20/day", "$30-60/day", "$100-250/day"),
        ),
        etiquette=("Always say 'Bonjour' when entering a shop", "Keep voices down in restaurants"),
        dress="Smart casual; cover up in churches",
        tipping="Service is included; round up or leave small change",
        greetings="'Bonjour' first; friends greet with la bise (cheek kisses)",
        taboos=("Asking for dishes to be heavily modified", "Talking about money"),
        customs=("Long lunches", "Sunday shop closures"),
        visa_info="Schengen zone. Many nationalities can visit visa-free for 90 days.",
        aliases=("paris", "nice", "lyon", "marseille", "bordeaux"),
    ),
    CountryProfile(
        code="IT",
        name="Italy",
        safety_rating="safe",
        safety_summary="Italy is safe overall; stay alert for pickpockets in crowded tourist sites.",
        concerns=("Pickpockets in Rome, Florence and Naples", "Fake petition scams"),
        safety_tips=("Validate train tickets before boarding", "Keep valuables in front pockets"),
        police="113",
        ambulance="118",
        tourist="112",
        health_advice=("Stay hydrated during summer heatwaves",),
        costs=CostTiers(
            budget=(60, 100),
            mid_range=(160, 280),
            luxury=(400, 900),
            accommodation=("$30-60/night", "$120-220/night", "$350-800+/night"),
            food=("$20-30/day", "$45-80/day", "$150-300/day"),
            transport=("$8-15/day", "$20-40/day", "$60-150/day"),
            activities=("$10-20/day", "$30-60/day", "$100-250/day"),
        ),
        etiquette=("Order cappuccino only in the morning", "Greet shopkeepers when entering"),
        dress="Shoulders and knees covered in churches",
        tipping="A 'coperto' cover charge is common; tipping is optional",
        greetings="Handshake, or two cheek kisses among friends",
        taboos=("Putting pineapple on pizza", "Eating on church steps"),
        customs=("Evening passeggiata stroll", "Aperitivo before dinner"),
        visa_info="Schengen zone. Many nationalities can visit visa-free for 90 days.",
        aliases=("rome", "venice", "florence", "milan", "naples"),
    ),
    CountryProfile(
        code="ES",
        name="Spain",
        safety_rating="safe",
        safety_summary="Spain is safe; pickpocketing in Barcelona and Madrid is the main concern.",
        concerns=("Pickpockets on Las Ramblas", "Summer heat"),
        safety_tips=("Keep phones off café tables", "Use official taxis"),
        police="091",
        ambulance="061",
        tourist="112",
        health_advice=("Use sun protection; midday heat is intense",),
        costs=CostTiers(
            budget=(50, 80),
            mid_range=(130, 220),
            luxury=(350, 700),
            accommodation=("$25-50/night", "$100-180/night", "$300-600+/night"),
            food=("$15-25/day", "$40-70/day", "$120-250/day"),
            transport=("$5-12/day", "$15-30/day", "$50-120/day"),
            activities=("$10-20/day", "$25-50/day", "$90-200/day"),
        ),
        etiquette=("Dinner starts late, often after 9pm", "Greet people in lifts and waiting rooms"),
        dress="Casual but neat; beachwear only at the beach",
        tipping="Small tips appreciated; round up the bill",
        greetings="Two kisses on the cheek among friends",
        taboos=("Confusing Catalan or Basque identity with Spanish",),
        customs=("Siesta closures in smaller towns", "Tapas hopping"),
        visa_info="Schengen zone. Many nationalities can visit visa-free for 90 days.",
        aliases=("barcelona", "madrid", "seville", "valencia", "granada"),
    ),
    CountryProfile(
        code="GR",
        name="Greece",
        safety_rating="safe",
        safety_summary="Greece is safe; petty theft and summer wildfires are the main concerns.",
        concerns=("Wildfires in summer", "Pickpockets in central Athens"),
        safety_tips=("Follow local wildfire warnings", "Watch bags on the Athens metro"),
        police="100",
        ambulance="166",
        tourist="1571 (Tourist Police)",
        health_advice=("Stay hydrated and avoid midday sun",),
        costs=CostTiers(
            budget=(45, 75),
            mid_range=(120, 200),
            luxury=(350, 700),
            accommodation=("$25-45/night", "$90-170/night", "$300-700+/night"),
            food=("$15-25/day", "$35-60/day", "$100-200/day"),
            transport=("$5-15/day", "$20-40/day", "$60-150/day"),
            activities=("$10-20/day", "$25-50/day", "$100-200/day"),
        ),
        etiquette=("Accept offered food or drink graciously", "Dress modestly at monasteries"),
        dress="Shoulders and knees covered at churches and monasteries",
        tipping="5-10% in restaurants is appreciated",
        greetings="Handshake; 'Yassas' is a polite hello",
        taboos=("The open-palm 'moutza' gesture",),
        customs=("Late dinners", "Name days celebrated like birthdays"),
        visa_info="Schengen zone. Many nationalities can visit visa-free for 90 days.",
        aliases=("athens", "santorini", "mykonos", "crete", "thessaloniki"),
    ),
    CountryProfile(
        code="PT",
        name="Portugal",
        safety_rating="very-safe",
        safety_summary="Portugal is one of Europe's safest countries.",
        concerns=("Pickpockets on Lisbon's tram 28",),
        safety_tips=("Beware of strong Atlantic currents at beaches",),
        police="112",
        ambulance="112",
        tourist="+351 213 421 623 (Lisbon tourist police)",
        health_advice=("Tap water is safe to drink",),
        costs=CostTiers(
            budget=(45, 70),
            mid_range=(110, 180),
            luxury=(300, 600),
            accommodation=("$20-45/night", "$80-150/night", "$250-500+/night"),
            food=("$12-20/day", "$30-55/day", "$100-200/day"),
            transport=("$5-10/day", "$15-30/day", "$50-100/day"),
            activities=("$5-15/day", "$20-45/day", "$80-180/day"),
        ),
        etiquette=("Don't assume Portuguese people speak Spanish",),
        dress="Casual; comfortable shoes for steep cobbled streets",
        tipping="Round up or leave 5-10% for good service",
        greetings="Handshake, or two cheek kisses among friends",
        taboos=("Calling Portugal part of Spain",),
        customs=("Couvert bread and olives are charged if eaten",),
        visa_info="Schengen zone. Many nationalities can visit visa-free for 90 days.",
        aliases=("lisbon", "porto", "faro", "madeira"),
    ),
    CountryProfile(
        code="TH",
        name="Thailand",
        safety_rating="safe",
        safety_summary="Thailand is generally safe; scams and road accidents are the main risks.",
        concerns=("Gem and tuk-tuk scams", "Road safety, especially on scooters"),
        safety_tips=("Wear a helmet and hold a valid licence when riding", "Use metered taxis or ride-hailing apps"),
        police="191",
        ambulance="1669",
        tourist="1155 (Tourist Police)",
        health_advice=("Use mosquito repellent against dengue", "Drink bottled water"),
        costs=CostTiers(
            budget=(25, 45),
            mid_range=(70, 130),
            luxury=(250, 500),
            accommodation=("$10-25/night", "$50-100/night", "$200-450+/night"),
            food=("$8-15/day", "$20-40/day", "$80-150/day"),
            transport=("$3-10/day", "$10-25/day", "$40-100/day"),
            activities=("$5-15/day", "$20-50/day", "$100-200/day"),
        ),
        etiquette=("Never touch someone's head", "Remove shoes before entering temples and homes"),
        dress="Cover shoulders and knees at temples",
        tipping="Not expected; rounding up or small tips appreciated",
        greetings="The wai: palms together with a slight bow",
        taboos=("Disrespecting the monarchy", "Pointing feet at people or Buddha images"),
        customs=("Merit-making at temples", "Songkran water festival in April"),
        common_mistakes=(
            ("Accepting 'the temple is closed' stories", "It is a lead-in to a shopping scam", "Check opening hours yourself"),
        ),
        visa_info="Many nationalities receive visa-free entry on arrival.",
        aliases=("bangkok", "phuket", "chiang mai", "krabi", "koh samui"),
    ),
    CountryProfile(
        code="TR",
        name="Turkey",
        safety_rating="moderate",
        safety_summary="Tourist areas of Turkey are generally safe; avoid areas near the Syrian border.",
        concerns=("Regions near the Syrian border", "Carpet shop and shoe-shine scams"),
        safety_tips=("Avoid political demonstrations",),
        police="155",
        ambulance="112",
        tourist="112",
        health_advice=("Drink bottled water outside major cities",),
        costs=CostTiers(
            budget=(30, 55),
            mid_range=(80, 150),
            luxury=(250, 500),
            accommodation=("$15-35/night", "$60-130/night", "$200-450+/night"),
            food=("$10-18/day", "$25-45/day", "$80-150/day"),
            transport=("$4-10/day", "$12-25/day", "$40-100/day"),
            activities=("$5-15/day", "$20-45/day", "$80-180/day"),
        ),
        etiquette=("Remove shoes in mosques and homes", "Accept tea when offered"),
        dress="Women cover hair in mosques; modest dress outside resorts",
        tipping="5-10% in restaurants",
        greetings="Handshake; 'Merhaba'",
        taboos=("Insulting Atatürk or the Turkish flag",),
        customs=("Tea culture", "Hammam bathing"),
        aliases=("istanbul", "cappadocia", "antalya", "izmir"),
    ),
    CountryProfile(
        code="MX",
        name="Mexico",
        safety_rating="caution",
        safety_summary="Safety varies widely by state; stick to established tourist areas and check advisories.",
        concerns=("Cartel violence in some states", "Express kidnappings via unlicensed taxis"),
        safety_tips=("Use app-based or hotel-arranged taxis", "Avoid driving at night between cities"),
        police="911",
        ambulance="911",
        tourist="078 (Ángeles Verdes)",
        health_advice=("Drink bottled or purified water",),
        costs=CostTiers(
            budget=(35, 60),
            mid_range=(90, 160),
            luxury=(300, 600),
            accommodation=("$15-35/night", "$60-130/night", "$250-550+/night"),
            food=("$10-20/day", "$25-50/day", "$90-180/day"),
            transport=("$5-10/day", "$15-30/day", "$50-120/day"),
            activities=("$5-15/day", "$25-50/day", "$100-200/day"),
        ),
        etiquette=("Greet with 'Buenos días' before asking questions",),
        dress="Casual; cover up in churches",
        tipping="10-15% in restaurants",
        greetings="Handshake, or a cheek kiss among friends",
        taboos=("Criticising the Virgin of Guadalupe",),
        customs=("Día de los Muertos in early November",),
        aliases=("mexico city", "cancun", "oaxaca", "tulum", "guadalajara"),
    ),
    CountryProfile(
        code="EG",
        name="Egypt",
        safety_rating="caution",
        safety_summary="Main tourist sites are well protected, but some regions carry serious risks.",
        concerns=("North Sinai and border areas", "Aggressive touts at monuments"),
        safety_tips=("Agree prices before any service", "Follow police checkpoints instructions"),
        police="122",
        ambulance="123",
        tourist="126 (Tourist Police)",
        health_advice=("Avoid tap water and unpeeled fruit", "Protect against sun and heat"),
        costs=CostTiers(
            budget=(25, 45),
            mid_range=(70, 130),
            luxury=(250, 500),
            accommodation=("$10-25/night", "$50-110/night", "$200-450+/night"),
            food=("$6-12/day", "$20-40/day", "$70-150/day"),
            transport=("$3-10/day", "$15-30/day", "$50-120/day"),
            activities=("$10-20/day", "$30-60/day", "$100-250/day"),
        ),
        etiquette=("Use your right hand for eating", "Ask before photographing people"),
        dress="Modest dress; cover shoulders and knees",
        tipping="Baksheesh is expected for most services",
        greetings="Handshake between men; wait for women to offer a hand",
        taboos=("Public displays of affection",),
        customs=("Ramadan changes opening hours",),
        aliases=("cairo", "luxor", "aswan", "giza", "alexandria"),
    ),
    CountryProfile(
        code="IS",
        name="Iceland",
        safety_rating="very-safe",
        safety_summary="Iceland has very low crime; nature and weather are the real hazards.",
        concerns=("Sudden weather changes", "Sneaker waves at black-sand beaches"),
        safety_tips=("Check road.is and safetravel.is daily", "Never turn your back on the ocean at Reynisfjara"),
        police="112",
        ambulance="112",
        tourist="112",
        health_advice=("Dress in layers; hypothermia is a risk year-round",),
        costs=CostTiers(
            budget=(100, 150),
            mid_range=(250, 400),
            luxury=(600, 1200),
            accommodation=("$60-120/night", "$200-350/night", "$500-1000+/night"),
            food=("$30-45/day", "$70-120/day", "$200-350/day"),
            transport=("$20-40/day", "$60-120/day", "$150-300/day"),
            activities=("$10-30/day", "$60-120/day", "$200-500/day"),
        ),
        etiquette=("Shower without a swimsuit before entering pools",),
        dress="Waterproof layers and sturdy boots",
        tipping="Not expected",
        greetings="Handshake; first names are the norm",
        taboos=("Off-road driving, which is illegal",),
        customs=("Geothermal pool culture",),
        aliases=("reykjavik",),
    ),
)

COUNTRY_PROFILES: Mapping[str, CountryProfile] = MappingProxyType(
    {profile.code: profile for profile in _PROFILES}
)


def _build_aliases() -> Mapping[str, str]:
    aliases = {}
    for profile in _PROFILES:
        aliases[profile.name.lower()] = profile.code
        for alias in profile.aliases:
            aliases[alias] = profile.code
    return MappingProxyType(aliases)


COUNTRY_ALIASES: Mapping[str, str] = _build_aliases()

THEMES: Mapping[str, str] = MappingProxyType(
    {
        "japan": "japan", "tokyo": "japan", "kyoto": "japan", "osaka": "japan",
        "france": "france", "paris": "france", "nice": "france", "lyon": "france",
        "italy": "italy", "rome": "italy", "venice": "italy", "florence": "italy", "milan": "italy",
        "thailand": "thailand", "bangkok": "thailand", "phuket": "thailand", "chiang mai": "thailand",
        "morocco": "morocco", "marrakech": "morocco", "fez": "morocco", "fes": "morocco",
        "greece": "greece", "athens": "greece", "santorini": "greece",
        "spain": "spain", "barcelona": "spain", "madrid": "spain",
        "portugal": "portugal", "lisbon": "portugal", "porto": "portugal",
        "turkey": "turkey", "istanbul": "turkey",
        "egypt": "egypt", "cairo": "egypt",
        "india": "india", "delhi": "india", "mumbai": "india",
        "brazil": "brazil", "rio": "brazil", "sao paulo": "brazil",
        "mexico": "mexico", "mexico city": "mexico", "cancun": "mexico",
        "australia": "australia", "sydney": "australia", "melbourne": "australia",
        "new zealand": "new-zealand", "auckland": "new-zealand",
        "iceland": "iceland", "reykjavik": "iceland",
        "peru": "peru", "lima": "peru", "cusco": "peru",
        "vietnam": "vietnam", "hanoi": "vietnam", "ho chi minh": "vietnam",
    }
)


def theme_for_destination(destination: str) -> str:
    """Return the UI theme for a destination, ``"default"`` when unknown.

    The whole name is tried first, then each comma-separated part
    (``"Tokyo, Japan"``). Partial words never match, so ``"New Mexico"``
    stays ``"default"``.
    """

    lower = destination.strip().lower()
    if lower in THEMES:
        return THEMES[lower]
    for segment in lower.split(","):
        theme = THEMES.get(segment.strip())
        if theme:
            return theme
    return "default"


def resolve_country_code(*names: Optional[str]) -> Optional[str]:
    """Map a country or city name (or an ISO code) to a known profile code."""

    for name in names:
        if not name:
            continue
        key = name.strip()
        if key.upper() in COUNTRY_PROFILES:
            return key.upper()
        code = COUNTRY_ALIASES.get(key.lower())
        if code:
            return code
    return None


def get_profile(*names: Optional[str]) -> Optional[CountryProfile]:
    """Look up a profile by ISO code, country name or well-known city."""

    code = resolve_country_code(*names)
    return COUNTRY_PROFILES.get(code) if code else None
