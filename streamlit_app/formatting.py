# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from datetime import date
from typing import Optional

TURKISH_MONTHS = [
    "Ocak",
    "Şubat",
    "Mart",
    "Nisan",
    "Mayıs",
    "Haziran",
    "Temmuz",
    "Ağustos",
    "Eylül",
    "Ekim",
    "Kasım",
    "Aralık",
]


def format_date(value: Optional[str]) -> str:
    """Renders an ISO date as "d MMMM yyyy" in Turkish, e.g. 1 Haziran 2024."""
    if not value:
        return "Tarih belirtilmemiş"
    try:
        parsed = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return "Geçersiz tarih"
    return f"{parsed.day} {TURKISH_MONTHS[parsed.month - 1]} {parsed.year}"
