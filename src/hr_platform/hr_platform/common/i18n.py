"""Boundary-only translation of error codes into user-facing text.

The core never builds localized strings; it raises ``DomainError`` with an
``ErrorCode`` and the HTTP layer asks the ``Localizer`` for a message.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_LANGUAGE
from ..core.exceptions import ErrorCode

MESSAGES: dict[str, dict[ErrorCode, str]] = {
    "en": {
        ErrorCode.INVALID_DATE: "The value of {field} is not a valid date.",
        ErrorCode.RETURN_BEFORE_DEPARTURE: "The return day cannot be before the departure day.",
        ErrorCode.DAY_COUNT_MISMATCH: "Number of days ({declared}) does not match the selected range ({computed}).",
        ErrorCode.OVERLAP_CONFLICT: "You already have a pending or approved request overlapping these dates.",
        ErrorCode.INVALID_DATE_RANGE: "The start date must be on or before the end date.",
        ErrorCode.EMPLOYEE_NOT_FOUND_OR_INACTIVE: "Employee not found or inactive.",
        ErrorCode.REQUEST_NOT_FOUND: "Request not found.",
        ErrorCode.ALREADY_PROCESSED: "This request has already been processed.",
        ErrorCode.INVALID_STATUS_TRANSITION: "A request can only be approved or rejected.",
        ErrorCode.INSUFFICIENT_BALANCE: "Insufficient vacation balance: {available} day(s) available, {requested} requested.",
        ErrorCode.NOT_OWNER: "This vacation does not belong to you.",
        ErrorCode.CAN_ONLY_EXTEND_APPROVED: "Only approved vacations can be extended.",
        ErrorCode.EXTEND_TO_DATE_MUST_BE_AFTER_RETURN: "The new end date must be after the current return day.",
        ErrorCode.EXTENSION_REQUEST_PENDING: "An extension request for this vacation is already pending.",
        ErrorCode.CANNOT_CANCEL: "Only pending or approved vacations can be cancelled.",
        ErrorCode.CANCELLATION_REQUEST_PENDING: "A cancellation request for this vacation is already pending.",
        ErrorCode.ALREADY_CLOCKED_IN: "You have already clocked in today.",
        ErrorCode.ALREADY_CLOCKED_OUT: "You have already clocked out today.",
        ErrorCode.NO_CLOCK_IN_FOUND: "You must clock in first.",
        ErrorCode.ALREADY_ON_BREAK: "You are already on a break.",
        ErrorCode.NOT_ON_BREAK: "You are not on a break.",
        ErrorCode.UNCLOSED_BREAK: "There is an unfinished break for today.",
        ErrorCode.CANNOT_CLOCK_OUT_ON_BREAK: "End your break before clocking out.",
        ErrorCode.INVALID_INPUT: "Invalid value for {field}.",
        ErrorCode.UNAUTHENTICATED: "Authentication required.",
        ErrorCode.FORBIDDEN: "You do not have permission to perform this action.",
        ErrorCode.HTTP_ERROR: "{description}",
        ErrorCode.INTERNAL_ERROR: "Internal server error.",
    },
    "ar": {
        ErrorCode.INVALID_DATE: "قيمة {field} ليست تاريخًا صالحًا.",
        ErrorCode.RETURN_BEFORE_DEPARTURE: "لا يمكن أن يكون يوم العودة قبل يوم المغادرة.",
        ErrorCode.DAY_COUNT_MISMATCH: "عدد الأيام ({declared}) لا يطابق الفترة المحددة ({computed}).",
        ErrorCode.OVERLAP_CONFLICT: "لديك طلب معلق أو معتمد يتداخل مع هذه التواريخ.",
        ErrorCode.INVALID_DATE_RANGE: "يجب أن يكون تاريخ البداية في أو قبل تاريخ النهاية.",
        ErrorCode.EMPLOYEE_NOT_FOUND_OR_INACTIVE: "الموظف غير موجود أو غير نشط.",
        ErrorCode.REQUEST_NOT_FOUND: "الطلب غير موجود.",
        ErrorCode.ALREADY_PROCESSED: "تمت معالجة هذا الطلب بالفعل.",
        ErrorCode.INVALID_STATUS_TRANSITION: "يمكن فقط الموافقة على الطلب أو رفضه.",
        ErrorCode.INSUFFICIENT_BALANCE: "رصيد الإجازات غير كافٍ: المتاح {available} يوم، والمطلوب {requested}.",
        ErrorCode.NOT_OWNER: "هذه الإجازة لا تخصك.",
        ErrorCode.CAN_ONLY_EXTEND_APPROVED: "يمكن تمديد الإجازات المعتمدة فقط.",
        ErrorCode.EXTEND_TO_DATE_MUST_BE_AFTER_RETURN: "يجب أن يكون تاريخ النهاية الجديد بعد يوم العودة الحالي.",
        ErrorCode.EXTENSION_REQUEST_PENDING: "يوجد طلب تمديد معلق لهذه الإجازة.",
        ErrorCode.CANNOT_CANCEL: "يمكن إلغاء الإجازات المعلقة أو المعتمدة فقط.",
        ErrorCode.CANCELLATION_REQUEST_PENDING: "يوجد طلب إلغاء معلق لهذه الإجازة.",
        ErrorCode.ALREADY_CLOCKED_IN: "لقد سجلت الحضور اليوم بالفعل.",
        ErrorCode.ALREADY_CLOCKED_OUT: "لقد سجلت الانصراف اليوم بالفعل.",
        ErrorCode.NO_CLOCK_IN_FOUND: "يجب تسجيل الحضور أولاً.",
        ErrorCode.ALREADY_ON_BREAK: "أنت في استراحة بالفعل.",
        ErrorCode.NOT_ON_BREAK: "أنت لست في استراحة.",
        ErrorCode.UNCLOSED_BREAK: "توجد استراحة غير منتهية لهذا اليوم.",
        ErrorCode.CANNOT_CLOCK_OUT_ON_BREAK: "أنهِ الاستراحة قبل تسجيل الانصراف.",
        ErrorCode.INVALID_INPUT: "قيمة غير صالحة للحقل {field}.",
        ErrorCode.UNAUTHENTICATED: "يلزم تسجيل الدخول.",
        ErrorCode.FORBIDDEN: "ليست لديك صلاحية لتنفيذ هذا الإجراء.",
        ErrorCode.HTTP_ERROR: "{description}",
        ErrorCode.INTERNAL_ERROR: "خطأ داخلي في الخادم.",
    },
}


class _SafeArgs(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class Localizer:
    def __init__(self, default_language: str = DEFAULT_LANGUAGE, catalogs: Optional[Mapping[str, Mapping[ErrorCode, str]]] = None):
        self._catalogs = catalogs or MESSAGES
        self._default = default_language if default_language in self._catalogs else DEFAULT_LANGUAGE

    def resolve_language(self, *candidates: Optional[str]) -> str:
        """First supported language among ``?lang=`` / Accept-Language values."""

        for candidate in candidates:
            if not candidate:
                continue
            for part in candidate.split(","):
                tag = part.split(";")[0].strip().lower()
                base = tag.split("-")[0]
                if base in self._catalogs:
                    return base
        return self._default

    def translate(self, code: ErrorCode, args: Optional[Mapping[str, Any]] = None, lang: Optional[str] = None) -> str:
        template = self._catalogs.get(lang or self._default, {}).get(code)
        if template is None:
            template = self._catalogs.get(self._default, {}).get(code)
        if template is None:
            return code.value
        return template.format_map(_SafeArgs(args or {}))
