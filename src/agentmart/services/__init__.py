"""Operations that span several repositories."""
