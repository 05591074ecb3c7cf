"""Reference lists used for search filter typeahead."""

MASTER_UNIVERSITIES: tuple[str, ...] = (
    "МГУ им. М.В. Ломоносова",
    "СПбГУ",
    "НИУ ВШЭ",
    "МГТУ им. Н.Э. Баумана",
    "ИТМО",
    "РУДН",
    "КФУ",
    "УрФУ",
    "ТГУ (Томский гос. университет)",
    "НГУ (Новосибирский гос. университет)",
    "НГТУ (Новосибирский гос. технический университет)",
    "НГУЭУ (Новосибирский гос. университет экономики и управления)",
    "ДВФУ",
    "РАНХиГС",
    "МИФИ (НИЯУ)",
    "РТУ МИРЭА",
    "ЮФУ",
    "МГИМО",
    "РГГУ",
    "НГПУ (Новосибирский гос. пед. университет)",
    "НСУЭМ (бывш. НГУЭУ)",
)

ALL_DORMS: tuple[str, ...] = (
    "Общежитие №1",
    "Общежитие №2",
    "Общежитие №3",
    "Общежитие №4",
    "Студгородок Северный",
    "Студгородок Южный",
    "Кампус на Ленинских горах",
    "Кампус Васильевский остров",
)

# Known dormitories per university; others fall back to ALL_DORMS
UNIVERSITY_DORMS: dict[str, tuple[str, ...]] = {
    "НГУ (Новосибирский гос. университет)": ("Общежитие №1", "Общежитие №2", "Студгородок Северный"),
    "НГТУ (Новосибирский гос. технический университет)": ("Общежитие №3", "Общежитие №4", "Студгородок Южный"),
    "НГУЭУ (Новосибирский гос. университет экономики и управления)": ("Общежитие №2", "Студгородок Южный"),
    "МГУ им. М.В. Ломоносова": ("Кампус на Ленинских горах",),
    "СПбГУ": ("Кампус Васильевский остров",),
}
