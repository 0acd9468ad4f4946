# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""SpotiQuiz client source tree."""
