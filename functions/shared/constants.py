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

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 6
MAX_PHOTO_BYTES = 5 * 1024 * 1024

DEFAULT_GROUP_ID = "demo"

# User-facing messages. The product ships in Turkish.
MSG_TITLE_LENGTH = "Başlık 1-100 karakter arasında olmalıdır"
MSG_DESCRIPTION_LENGTH = "Açıklama 1-500 karakter arasında olmalıdır"
MSG_INVALID_DATE = "Geçerli bir tarih giriniz"
MSG_PHOTO_REQUIRED = "Fotoğraf gereklidir"
MSG_PHOTO_TOO_LARGE = "Fotoğraf en fazla 5 MB olabilir"
MSG_INVALID_EMAIL = "Geçerli bir e-posta adresi giriniz"
MSG_PASSWORD_REQUIRED = "Şifre gereklidir"
MSG_PASSWORD_LENGTH = "Şifre en az 6 karakter olmalıdır"
MSG_DISPLAY_NAME_REQUIRED = "İsim gereklidir"
MSG_INVALID_FIELD = "Geçersiz değer"

MSG_INVALID_CREDENTIALS = "Geçersiz e-posta veya şifre"
MSG_EMAIL_IN_USE = "Bu e-posta adresi zaten kullanımda"
MSG_LOGIN_FAILED = "Giriş yapılırken bir hata oluştu"
MSG_REGISTER_FAILED = "Kayıt olurken bir hata oluştu"

MSG_MEMORY_NOT_FOUND = "Anı bulunamadı"
MSG_MEMORY_DELETED = "Anı başarıyla silindi"
MSG_LIST_FAILED = "Anılar getirilirken bir hata oluştu"
MSG_GET_FAILED = "Anı getirilirken bir hata oluştu"
MSG_CREATE_FAILED = "Anı oluşturulurken bir hata oluştu"
MSG_DELETE_FAILED = "Anı silinirken bir hata oluştu"
MSG_UNEXPECTED = "Bir şeyler yanlış gitti!"
