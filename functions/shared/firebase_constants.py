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

# Firestore collection holding one document per memory group.
MEMORIES_COLLECTION = "memories"

# Field names on a memory group document.
ITEMS_FIELD = "items"
CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"

# Cloud Storage prefix for uploaded photos: memories/<groupId>/<memoryId>
PHOTO_STORAGE_PREFIX = "memories"

PUBLIC_STORAGE_BASE_URL = "https://storage.googleapis.com"
