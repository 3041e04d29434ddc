"""Display strings for hype, moments and one-play labels (English / Japanese)."""

from __future__ import annotations

from models import HypeLevel, PlayCategory

SUPPORTED_LANGS = ("en", "ja")
DEFAULT_LANG = "en"

_TEXT: dict[str, dict[str, str]] = {
    "en": {
        "live": "LIVE",
        "final": "FINAL",
        "waiting": "Updates during the game.",
        "no_data": "No win-probability data yet.",
        "label_wp": "Win prob",
        "home": "Home",
        "away": "Away",
        "inning": "Inning {inning}",
        "wp_swing": "Win probability swung {delta:.0f} pts",
        "drama": "Drama index hit {drama:.0f}",
        "leverage": "High-leverage spot ({leverage:.1f})",
        "spike": "The park is shaking",
    },
    "ja": {
        "live": "LIVE",
        "final": "終了",
        "waiting": "試合中に自動更新します。",
        "no_data": "勝率データがまだありません。",
        "label_wp": "勝率",
        "home": "ホーム",
        "away": "アウェイ",
        "inning": "{inning}回",
        "wp_swing": "勝率が{delta:.0f}ポイント変動",
        "drama": "ドラマ指数 {drama:.0f}",
        "leverage": "勝負どころ（{leverage:.1f}）",
        "spike": "球場が揺れている",
    },
}

_NARRATIVE: dict[str, dict[HypeLevel, str]] = {
    "en": {
        HypeLevel.CALM: "Quiet at the park.",
        HypeLevel.WARM: "Something is brewing.",
        HypeLevel.HOT: "Tension is rising!",
        HypeLevel.INSANE: "Absolute chaos!",
    },
    "ja": {
        HypeLevel.CALM: "静かな展開。",
        HypeLevel.WARM: "何かが起きそう。",
        HypeLevel.HOT: "緊張感が高まる！",
        HypeLevel.INSANE: "大興奮！",
    },
}

_CATEGORY_LABELS: dict[str, dict[PlayCategory, str]] = {
    "en": {
        PlayCategory.HR: "Home run",
        PlayCategory.SB: "Stolen base",
        PlayCategory.K: "Strikeout",
        PlayCategory.BB: "Walk / HBP",
        PlayCategory.HIT: "Base hit",
        PlayCategory.DP: "Double play",
        PlayCategory.ERROR: "Error",
        PlayCategory.SAC: "Sacrifice",
        PlayCategory.RUN: "Run scores",
        PlayCategory.OUT: "Out",
        PlayCategory.UNKNOWN: "Other",
    },
    "ja": {
        PlayCategory.HR: "ホームラン",
        PlayCategory.SB: "盗塁",
        PlayCategory.K: "三振",
        PlayCategory.BB: "四死球",
        PlayCategory.HIT: "ヒット",
        PlayCategory.DP: "併殺",
        PlayCategory.ERROR: "エラー",
        PlayCategory.SAC: "犠打・犠飛",
        PlayCategory.RUN: "得点",
        PlayCategory.OUT: "アウト",
        PlayCategory.UNKNOWN: "その他",
    },
}

_BADGES: dict[str, dict[PlayCategory, str]] = {
    "en": {
        PlayCategory.HR: "Moonshot Oracle",
        PlayCategory.SB: "Base Thief Whisperer",
        PlayCategory.K: "K Prophet",
        PlayCategory.BB: "Eye of the Zone",
        PlayCategory.HIT: "Contact Seer",
        PlayCategory.DP: "Twin Killing Mystic",
        PlayCategory.ERROR: "Chaos Reader",
        PlayCategory.SAC: "Small-Ball Sage",
        PlayCategory.RUN: "Run Caller",
        PlayCategory.OUT: "Steady Hand",
        PlayCategory.UNKNOWN: "Lucky Guess",
    },
    "ja": {
        PlayCategory.HR: "アーチ予言者",
        PlayCategory.SB: "盗塁の読み手",
        PlayCategory.K: "三振の預言者",
        PlayCategory.BB: "選球眼",
        PlayCategory.HIT: "ヒット職人",
        PlayCategory.DP: "併殺マスター",
        PlayCategory.ERROR: "波乱の読み手",
        PlayCategory.SAC: "スモールボール賢者",
        PlayCategory.RUN: "得点コーラー",
        PlayCategory.OUT: "堅実派",
        PlayCategory.UNKNOWN: "ラッキー",
    },
}

for _lang in SUPPORTED_LANGS:
    for _name, _table in (("narrative", _NARRATIVE), ("labels", _CATEGORY_LABELS), ("badges", _BADGES)):
        _missing = set(HypeLevel if _table is _NARRATIVE else PlayCategory) - set(_table[_lang])
        if _missing:
            raise RuntimeError(f"{_name}[{_lang}] is missing {sorted(m.value for m in _missing)}")


def normalize_lang(lang: str | None) -> str:
    lang = (lang or "").strip().lower()
    return lang if lang in SUPPORTED_LANGS else DEFAULT_LANG


def text(key: str, lang: str = DEFAULT_LANG, **fmt: object) -> str:
    template = _TEXT[normalize_lang(lang)][key]
    return template.format(**fmt) if fmt else template


def narrative(level: HypeLevel, lang: str = DEFAULT_LANG) -> str:
    return _NARRATIVE[normalize_lang(lang)][level]


def category_label(category: PlayCategory, lang: str = DEFAULT_LANG) -> str:
    return _CATEGORY_LABELS[normalize_lang(lang)][category]


def badge_for(category: PlayCategory, lang: str = DEFAULT_LANG) -> str:
    return _BADGES[normalize_lang(lang)][category]
