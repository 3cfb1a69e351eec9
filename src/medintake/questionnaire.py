"""Canonical medical-history questionnaire used to seed new forms.

The catalog mirrors the clinic's paper intake sheet (German wording).
Forms copy these questions at creation time, so editing the catalog never
changes a form that already exists; bump ``TEMPLATE_VERSION`` when it does.
Ids and answer types are part of the stored form layout and must stay
stable, including ids that are not snake_case such as
``Typhoid/paratyphoid/Ruhr``.
"""

from __future__ import annotations

from typing import Optional

from medintake.models import QUESTION_TYPES, Question

TEMPLATE_VERSION = "2025.1"
DEFAULT_FORM_NAME = "Patient Medical History"

# (id, prompt text, answer type)
_CATALOG: tuple[tuple[str, str, str], ...] = (
    ("current_complaints", "Jetzige Beschwerden, Gesundheitsstörungen", "string"),
    ("fever", "Haben Sie Fieber?", "boolean"),
    ("headaches", "Leiden Sie an Kopfschmerzen (auch Druckgefühl im Kopf)?", "boolean"),
    ("eye_pain", "Haben Sie Augenschmerzen?", "boolean"),
    ("throat_pain", "Haben Sie Halsschmerzen oder Schluckbeschwerden?", "boolean"),
    ("Typhoid/paratyphoid/Ruhr", "Hatten Sie Typhoid/paratyphoid/Ruhr?", "boolean"),
    ("tuberculosis", "Hatten Sie Tuberkulose (Tbc)?", "boolean"),
    ("glaucoma", "Hatten Sie Grüner Star, Glaukom?", "boolean"),
    ("sinusitis", "Hatten Sie Nasen-Nebenhöhlenentzündungen?", "boolean"),
    ("thyroid_diseases", "Hatten Sie Schilddrüsenkrankheiten?", "boolean"),
    ("pneumonia", "Hatten Sie Lungen-, Rippenfellentzündung länger dauernde Bronchitis?", "boolean"),
    ("hypertension", "Hatten Sie hohen Blutdruck?", "boolean"),
    ("stroke", "Hatten Sie einen Schlaganfall oder Lähmungen?", "boolean"),
    ("heart_attack", "Hatten Sie einen Herzinfarkt?", "boolean"),
    ("heart_diseases", "Hatten Sie andere Herzkrankheiten oder Gefäßleiden?", "boolean"),
    ("diabetes", "Haben Sie eine Zuckerkrankheit (Diabetes)?", "boolean"),
    ("allergies", "Haben Sie Allergien oder Unverträglichkeiten (z.B. Penicillin, Röntgenkontrastmittel)?", "string"),
    ("asthma", "Haben Sie Asthma oder Heuschnupfen?", "boolean"),
    ("gastrointestinal", "Hatten Sie Magen- oder Zwölffingerdarmgeschwür oder Verdauungsprobleme?", "boolean"),
    ("liver_diseases", "Hatten Sie Leber- oder Gallenerkrankungen?", "boolean"),
    ("kidney_diseases", "Leiden Sie an Nieren-, Harnleiter- oder Blasensteinen?", "boolean"),
    ("prostate", "Hatten Sie Erkrankungen der Vorsteherdrüse (Prostata)?", "boolean"),
    ("urination_problems", "Hatten Sie Schwierigkeiten beim Wasserlassen?", "boolean"),
    ("thyroid", "Hatten Sie Schilddrüsenerkrankungen?", "boolean"),
    ("cancer", "Haben oder hatten Sie Krebs (bösartige Tumore)?", "boolean"),
    ("epilepsy", "Hatten Sie Epilepsie (Krampfanfälle)?", "boolean"),
    ("operations", "Wurden Sie schon mal operiert/mehrfach operiert? Wenn ja, wann und was?", "string"),
    ("xray_treatment", "Wurden Sie schon einmal mit Radium oder Röntgenstrahlen behandelt? Wenn ja, wann?", "string"),
    ("last_xray", "Wann war die letzte Röntgenuntersuchung?", "string"),
    ("medications", "Nehmen Sie regelmäßig Medikamente ein (auch Abführ-, Beruhigungs-, Schlaf- oder Kopfschmerzmittel)? Wenn ja, welche?", "string"),
    ("hormones", "Nehmen oder nahmen Sie die Pille oder sonstige Hormonpräparate?", "boolean"),
    ("alcohol", "Trinken Sie regelmäßig alkoholische Getränke?", "boolean"),
    ("smoking", "Rauchen Sie gewohnheitsmäßig? Wenn ja, wieviel?", "string"),
    ("drugs", "Nehmen oder nahmen Sie Drogen? Wenn ja, welche?", "string"),
    ("sport", "Treiben Sie weniger als zweimal wöchentlich Sport?", "boolean"),
    ("family_history", "Sind in Ihrer Familie folgende Krankheiten vorgekommen (Diabetes, Herzinfarkt, Bluthochdruck, Krebs)?", "string"),
    ("weight_gain", "Haben Sie innerhalb der letzten 12 Monate mehr als 5kg zugenommen?", "boolean"),
    ("weight_loss", "Haben Sie innerhalb der letzten 12 Monate mehr als 5kg abgenommen?", "boolean"),
    ("sleep_disorders", "Schlafen Sie schlecht oder schlafen Sie schlecht ein?", "boolean"),
    ("neurological", "Leiden Sie an einer Neurose oder anderen nervösen Beschwerden?", "boolean"),
    ("pregnancy", "Sind Sie schwanger?", "boolean"),
    ("sensory_disorders", "Leiden Sie an einer Sehstörung?", "boolean"),
    ("travelers", "Waren Sie in den letzten 12 Monaten in Mittelmeerländern, in Asien oder in den Tropen?", "boolean"),
    ("thirst", "Haben Sie auffallend großen Durst?", "boolean"),
    ("intimate_concerns", "Bedrückt Sie etwas erotisches (beruflich, privat oder in der Partnerschaft)?", "boolean"),
    ("health_affected_by_noise", "Fühlen Sie sich in Ihrer Gesundheit beeinträchtigt durch Lärm (Arbeitsplatz, Freizeit, Nachtruhe)?", "boolean"),
    ("health_affected_by_dust", "Fühlen Sie sich in Ihrer Gesundheit beeinträchtigt durch Staub/Rauch/Abgase (Arbeitsplatz, Wohnbereich)?", "boolean"),
    ("health_affected_by_shift_work", "Fühlen Sie sich in Ihrer Gesundheit beeinträchtigt durch Schichtarbeit?", "boolean"),
    ("family_high_blood_pressure", "Kommt hoher Blutdruck oder Schlaganfall in Ihrer Familie vor?", "boolean"),
    ("family_heart_attack", "Kommt Herzinfarkt in Ihrer Familie vor?", "boolean"),
    ("family_overweight", "Kommt Übergewicht in Ihrer Familie vor?", "boolean"),
    ("family_diabetes", "Kommen Zuckerkrankheiten (Diabetes) in Ihrer Familie vor?", "boolean"),
    ("family_gout", "Kommt Gicht in Ihrer Familie vor?", "boolean"),
    ("family_neurological", "Kommen Nerven-, Gemüts-, Geisteskrankheiten in Ihrer Familie vor?", "boolean"),
    ("family_epilepsy", "Kommt Epilepsie (Krampfanfälle) in Ihrer Familie vor?", "boolean"),
    ("family_tuberculosis", "Kommt Tuberkulose (Tbc) in Ihrer Familie vor?", "boolean"),
    ("family_gallstones", "Kommen Gallensteine, Nierensteine, Blasensteine in Ihrer Familie vor?", "boolean"),
    ("family_cancer", "Kommt Krebs (einschl. Blutkrebs) in Ihrer Familie vor?", "boolean"),
    ("family_addiction", "Kommen Suchtkrankheiten (Alkohol, Medikamente, Drogen) in Ihrer Familie vor?", "boolean"),
    ("family_other", "Kommen andere Krankheiten in Ihrer Familie vor? Wenn ja, welche?", "string"),
    ("family_chronic_diseases", "Sind chronische Erkrankungen in der Familie bekannt? Wenn ja, welche?", "string"),
    ("occupation", "Welche Tätigkeit üben Sie gegenwärtig aus?", "string"),
    ("accident", "Liegt ein Unfall vor?", "boolean"),
    ("marital_status", "Familienstand (ledig, verheiratet, geschieden, verwitwet, getrennt lebend)?", "string"),
    ("nationality", "Staatsangehörigkeit:", "string"),
)


def get_default_questions() -> list[Question]:
    """Return fresh, unanswered copies of every catalog question."""
    return [
        QUESTION_TYPES[answer_type](id=qid, text=text, answer=None, confidence=0.0, source=None)
        for qid, text, answer_type in _CATALOG
    ]


def default_question_ids() -> list[str]:
    return [qid for qid, _, _ in _CATALOG]


def questions_or_defaults(questions: Optional[list[Question]]) -> tuple[list[Question], bool]:
    """Return ``questions`` or the template defaults when they are missing or empty.

    The second element tells whether the defaults were substituted.
    """
    if questions:
        return list(questions), False
    return get_default_questions(), True
