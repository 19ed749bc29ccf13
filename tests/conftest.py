"""
Pytest configuration and shared fixtures
"""
import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# =========================
# Pytest Configuration
# =========================
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, pure functions)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (full parse + enrich runs)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests (large inputs)"
    )


# =========================
# Time Fixtures
# =========================
@pytest.fixture
def fixed_now():
    """Reference time shared by date-dependent tests"""
    return datetime(2024, 6, 15, 12, 0, 0)


# =========================
# Sample Profile Fixtures
# =========================
@pytest.fixture
def sample_profile_text():
    """Realistic copy-paste of a French profile page"""
    return "\n".join([
        "Vinted",
        "Rechercher des articles",
        "MyShop",
        "À propos",
        "À propos : Lyon, France",
        "42",
        "Abonnés",
        "17",
        "Abonnements",
        "4.8",
        "(120)",
        "Dressing",
        "marque : Zara, taille : M, prix : 12,50 €",
        "marque : zara, taille : S, prix : 20,00 €",
        "marque : Nike, taille : 40, prix : 35 €",
        "Évaluations",
        "Vinted il y a 1 mois",
        "Vente automatique confirmée",
        "alice il y a 2 mois",
        "Merci, article parfait !",
        "bob il y a 3 semaines",
        "Thank you, great seller",
        "carla il y a 1 an",
        "Grazie mille, tutto perfetto",
        "dora il y a 5 jours",
        "MyShop il y a 4 jours",
        "Merci à toi !",
        "eve il y a 2 heures",
    ])


@pytest.fixture
def minimal_profile_text():
    """Smallest text the parser accepts plus one review"""
    return "MyShop\nÀ propos\n42\nAbonnés\n4.8\n(120)\nalice il y a 2 mois merci parfait"


@pytest.fixture
def second_profile_text():
    """Another seller, for comparison tests"""
    return "\n".join([
        "Boutique: OtherShop",
        "About : Madrid, Espagne",
        "1 250",
        "Followers",
        "3",
        "Following",
        "4,5",
        "(1 024)",
        "juan 2 months ago",
        "Muchas gracias, todo perfecto",
        "maria 1 month ago Muy rápido, gracias",
        "lea 3 months ago",
        "Super vendeuse, très rapide",
    ])


@pytest.fixture
def no_shop_text():
    """Profile-like text without any shop name marker"""
    return "42\nAbonnés\n4.8\n(120)\nalice il y a 2 mois\nmerci"


@pytest.fixture
def sample_comments():
    """Comments in several languages"""
    return {
        "fr": "Merci, envoi rapide et article conforme",
        "en": "Thanks, fast shipping and item as described",
        "es": "Muchas gracias, todo perfecto",
        "it": "Grazie, spedizione veloce, tutto ok",
        "de": "Danke, sehr schnell angekommen",
        "nl": "Bedankt, heel snel verzonden, netjes",
        "pt": "Muito obrigada, chegou rápido",
    }
