"""Terminal styles, text formatting and screen navigation helpers."""