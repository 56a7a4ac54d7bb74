DASHBOARD_TXT = """
## 🧭 Pilot: self-coaching dashboard

Four screens, one pilot. Everything you enter is saved locally as soon as you change it.

- **Radar**: calibrate the fog density and how loud each influence is.
- **Topo**: your summit objective, its target date and three habit anchors.
- **Cockpit**: the +1% progress log and the SOS protocol.
- **Mission**: mastery vs impact, computed from the three other screens.
"""

# (page id, nav button label, section title, subtitle)
PAGES = [
    ("radar", "🧭 Radar", "Système de Navigation", "Calibrage des Capteurs"),
    ("ascension", "⛰️ Topo", "Déploiement Stratégique", "Altitude & Matériel"),
    ("cockpit", "📈 Cockpit", "Protocole de Résilience", "Journal & Urgences"),
    ("mission", "🎯 Mission", "Le Manifeste de Gravité", "Autorisation de Vol"),
]

CRISIS_PROTOCOL_TXT = """
### ⚠️ MODE SURVIE ACTIVÉ

Ne réfléchis pas. Exécute :

**N'oublie pas ton objectif, ouvre ton sac et accroche toi à tes mousquetons.**

#### Ancrages de Sécurité
"""


def page_header(title: str, subtitle: str) -> str:
    return f"<small>{title.upper()}</small>\n\n## {subtitle}"
