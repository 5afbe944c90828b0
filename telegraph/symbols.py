# telegraph/symbols.py
"""
Tabella Morse ITU: carattere -> codice ('.'/'-') e mappa inversa.
Le lettere accentate servono solo in ricezione: in trasmissione il testo
viene normalizzato (accenti rimossi) prima della ricerca.
"""

MORSE = {
    'A': '.-',   'B': '-...', 'C': '-.-.', 'D': '-..',  'E': '.',
    'F': '..-.', 'G': '--.',  'H': '....', 'I': '..',   'J': '.---',
    'K': '-.-',  'L': '.-..', 'M': '--',   'N': '-.',   'O': '---',
    'P': '.--.', 'Q': '--.-', 'R': '.-.',  'S': '...',  'T': '-',
    'U': '..-',  'V': '...-', 'W': '.--',  'X': '-..-', 'Y': '-.--',
    'Z': '--..',
    '0': '-----','1': '.----','2': '..---','3': '...--','4': '....-',
    '5': '.....','6': '-....','7': '--...','8': '---..','9': '----.',
    '.': '.-.-.-',',': '--..--','?': '..--..',"'": '.----.','!': '-.-.--',
    '/': '-..-.', '(': '-.--.', ')': '-.--.-','&': '.-...', ':': '---...',
    ';': '-.-.-.','=': '-...-', '+': '.-.-.', '-': '-....-','_': '..--.-',
    '"': '.-..-.','$': '...-..-','@': '.--.-.',
    'Á': '.--.-', 'Ä': '.-.-',  'É': '..-..', 'Ñ': '--.--', 'Ö': '---.',
    'Ü': '..--',
}
CODE_TO_CHAR = {v: k for k, v in MORSE.items()}