"""Operations against the mirror table, upstream and local storage."""
