# mid.py - Maritime Identification Digits to country
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# An MMSI carries its flag state in three MID digits.  Where those sit
# depends on the kind of station:
#
#   MIDxxxxxx   ship station
#   0MIDxxxxx   group of ships
#   00MIDxxxx   coast station
#   111MIDxxx   SAR aircraft
#   98MIDxxxx   auxiliary craft associated with a parent ship
#   99MIDxxxx   aid to navigation
#   97xxxxxxx   AIS-SART, MOB and EPIRB-AIS; no flag state
#
# Only a selection of the ITU MID allocations is listed here.

mid_table = {
    201: ("Albania", "AL"),
    202: ("Andorra", "AD"),
    203: ("Austria", "AT"),
    204: ("Azores", "PT"),
    205: ("Belgium", "BE"),
    206: ("Belarus", "BY"),
    207: ("Bulgaria", "BG"),
    208: ("Vatican City State", "VA"),
    209: ("Cyprus", "CY"),
    210: ("Cyprus", "CY"),
    211: ("Germany", "DE"),
    212: ("Cyprus", "CY"),
    213: ("Georgia", "GE"),
    214: ("Moldova", "MD"),
    215: ("Malta", "MT"),
    216: ("Armenia", "AM"),
    218: ("Germany", "DE"),
    219: ("Denmark", "DK"),
    220: ("Denmark", "DK"),
    224: ("Spain", "ES"),
    225: ("Spain", "ES"),
    226: ("France", "FR"),
    227: ("France", "FR"),
    228: ("France", "FR"),
    229: ("Malta", "MT"),
    230: ("Finland", "FI"),
    231: ("Faroe Islands", "FO"),
    232: ("United Kingdom", "GB"),
    233: ("United Kingdom", "GB"),
    234: ("United Kingdom", "GB"),
    235: ("United Kingdom", "GB"),
    236: ("Gibraltar", "GI"),
    237: ("Greece", "GR"),
    238: ("Croatia", "HR"),
    239: ("Greece", "GR"),
    240: ("Greece", "GR"),
    241: ("Greece", "GR"),
    242: ("Morocco", "MA"),
    243: ("Hungary", "HU"),
    244: ("Netherlands", "NL"),
    245: ("Netherlands", "NL"),
    246: ("Netherlands", "NL"),
    247: ("Italy", "IT"),
    248: ("Malta", "MT"),
    249: ("Malta", "MT"),
    250: ("Ireland", "IE"),
    251: ("Iceland", "IS"),
    252: ("Liechtenstein", "LI"),
    253: ("Luxembourg", "LU"),
    254: ("Monaco", "MC"),
    255: ("Madeira", "PT"),
    256: ("Malta", "MT"),
    257: ("Norway", "NO"),
    258: ("Norway", "NO"),
    259: ("Norway", "NO"),
    261: ("Poland", "PL"),
    262: ("Montenegro", "ME"),
    263: ("Portugal", "PT"),
    264: ("Romania", "RO"),
    265: ("Sweden", "SE"),
    266: ("Sweden", "SE"),
    267: ("Slovakia", "SK"),
    268: ("San Marino", "SM"),
    269: ("Switzerland", "CH"),
    270: ("Czech Republic", "CZ"),
    271: ("Turkey", "TR"),
    272: ("Ukraine", "UA"),
    273: ("Russian Federation", "RU"),
    274: ("North Macedonia", "MK"),
    275: ("Latvia", "LV"),
    276: ("Estonia", "EE"),
    277: ("Lithuania", "LT"),
    278: ("Slovenia", "SI"),
    279: ("Serbia", "RS"),
    301: ("Anguilla", "AI"),
    303: ("Alaska", "US"),
    304: ("Antigua and Barbuda", "AG"),
    305: ("Antigua and Barbuda", "AG"),
    306: ("Curacao", "CW"),
    307: ("Aruba", "AW"),
    308: ("Bahamas", "BS"),
    309: ("Bahamas", "BS"),
    310: ("Bermuda", "BM"),
    311: ("Bahamas", "BS"),
    312: ("Belize", "BZ"),
    314: ("Barbados", "BB"),
    316: ("Canada", "CA"),
    319: ("Cayman Islands", "KY"),
    321: ("Costa Rica", "CR"),
    323: ("Cuba", "CU"),
    325: ("Dominica", "DM"),
    327: ("Dominican Republic", "DO"),
    329: ("Guadeloupe", "GP"),
    330: ("Grenada", "GD"),
    331: ("Greenland", "GL"),
    332: ("Guatemala", "GT"),
    334: ("Honduras", "HN"),
    336: ("Haiti", "HT"),
    338: ("United States of America", "US"),
    339: ("Jamaica", "JM"),
    341: ("Saint Kitts and Nevis", "KN"),
    343: ("Saint Lucia", "LC"),
    345: ("Mexico", "MX"),
    347: ("Martinique", "MQ"),
    348: ("Montserrat", "MS"),
    350: ("Nicaragua", "NI"),
    351: ("Panama", "PA"),
    352: ("Panama", "PA"),
    353: ("Panama", "PA"),
    354: ("Panama", "PA"),
    355: ("Panama", "PA"),
    356: ("Panama", "PA"),
    357: ("Panama", "PA"),
    358: ("Puerto Rico", "PR"),
    359: ("El Salvador", "SV"),
    361: ("Saint Pierre and Miquelon", "PM"),
    362: ("Trinidad and Tobago", "TT"),
    364: ("Turks and Caicos Islands", "TC"),
    366: ("United States of America", "US"),
    367: ("United States of America", "US"),
    368: ("United States of America", "US"),
    369: ("United States of America", "US"),
    370: ("Panama", "PA"),
    371: ("Panama", "PA"),
    372: ("Panama", "PA"),
    373: ("Panama", "PA"),
    374: ("Panama", "PA"),
    375: ("Saint Vincent and the Grenadines", "VC"),
    376: ("Saint Vincent and the Grenadines", "VC"),
    377: ("Saint Vincent and the Grenadines", "VC"),
    378: ("British Virgin Islands", "VG"),
    379: ("United States Virgin Islands", "VI"),
    401: ("Afghanistan", "AF"),
    403: ("Saudi Arabia", "SA"),
    405: ("Bangladesh", "BD"),
    408: ("Bahrain", "BH"),
    410: ("Bhutan", "BT"),
    412: ("China", "CN"),
    413: ("China", "CN"),
    414: ("China", "CN"),
    416: ("Taiwan", "TW"),
    417: ("Sri Lanka", "LK"),
    419: ("India", "IN"),
    422: ("Iran", "IR"),
    423: ("Azerbaijan", "AZ"),
    425: ("Iraq", "IQ"),
    428: ("Israel", "IL"),
    431: ("Japan", "JP"),
    432: ("Japan", "JP"),
    434: ("Turkmenistan", "TM"),
    436: ("Kazakhstan", "KZ"),
    437: ("Uzbekistan", "UZ"),
    438: ("Jordan", "JO"),
    440: ("Korea, Republic of", "KR"),
    441: ("Korea, Republic of", "KR"),
    443: ("Palestine", "PS"),
    445: ("Korea, Democratic People's Republic of", "KP"),
    447: ("Kuwait", "KW"),
    450: ("Lebanon", "LB"),
    451: ("Kyrgyzstan", "KG"),
    453: ("Macao", "MO"),
    455: ("Maldives", "MV"),
    457: ("Mongolia", "MN"),
    459: ("Nepal", "NP"),
    461: ("Oman", "OM"),
    463: ("Pakistan", "PK"),
    466: ("Qatar", "QA"),
    468: ("Syria", "SY"),
    470: ("United Arab Emirates", "AE"),
    471: ("United Arab Emirates", "AE"),
    472: ("Tajikistan", "TJ"),
    473: ("Yemen", "YE"),
    475: ("Yemen", "YE"),
    477: ("Hong Kong", "HK"),
    478: ("Bosnia and Herzegovina", "BA"),
    501: ("Adelie Land", "FR"),
    503: ("Australia", "AU"),
    506: ("Myanmar", "MM"),
    508: ("Brunei Darussalam", "BN"),
    510: ("Micronesia", "FM"),
    511: ("Palau", "PW"),
    512: ("New Zealand", "NZ"),
    514: ("Cambodia", "KH"),
    515: ("Cambodia", "KH"),
    516: ("Christmas Island", "CX"),
    518: ("Cook Islands", "CK"),
    520: ("Fiji", "FJ"),
    523: ("Cocos (Keeling) Islands", "CC"),
    525: ("Indonesia", "ID"),
    529: ("Kiribati", "KI"),
    531: ("Laos", "LA"),
    533: ("Malaysia", "MY"),
    536: ("Northern Mariana Islands", "MP"),
    538: ("Marshall Islands", "MH"),
    540: ("New Caledonia", "NC"),
    542: ("Niue", "NU"),
    544: ("Nauru", "NR"),
    546: ("French Polynesia", "PF"),
    548: ("Philippines", "PH"),
    553: ("Papua New Guinea", "PG"),
    555: ("Pitcairn Island", "PN"),
    557: ("Solomon Islands", "SB"),
    559: ("American Samoa", "AS"),
    561: ("Samoa", "WS"),
    563: ("Singapore", "SG"),
    564: ("Singapore", "SG"),
    565: ("Singapore", "SG"),
    566: ("Singapore", "SG"),
    567: ("Thailand", "TH"),
    570: ("Tonga", "TO"),
    572: ("Tuvalu", "TV"),
    574: ("Viet Nam", "VN"),
    576: ("Vanuatu", "VU"),
    577: ("Vanuatu", "VU"),
    578: ("Wallis and Futuna Islands", "WF"),
    601: ("South Africa", "ZA"),
    603: ("Angola", "AO"),
    605: ("Algeria", "DZ"),
    609: ("Burundi", "BI"),
    610: ("Benin", "BJ"),
    611: ("Botswana", "BW"),
    613: ("Cameroon", "CM"),
    615: ("Congo", "CG"),
    616: ("Comoros", "KM"),
    617: ("Cabo Verde", "CV"),
    619: ("Cote d'Ivoire", "CI"),
    621: ("Djibouti", "DJ"),
    622: ("Egypt", "EG"),
    624: ("Ethiopia", "ET"),
    625: ("Eritrea", "ER"),
    626: ("Gabon", "GA"),
    627: ("Ghana", "GH"),
    629: ("Gambia", "GM"),
    630: ("Guinea-Bissau", "GW"),
    631: ("Equatorial Guinea", "GQ"),
    632: ("Guinea", "GN"),
    634: ("Kenya", "KE"),
    636: ("Liberia", "LR"),
    637: ("Liberia", "LR"),
    642: ("Libya", "LY"),
    644: ("Lesotho", "LS"),
    645: ("Mauritius", "MU"),
    647: ("Madagascar", "MG"),
    649: ("Mali", "ML"),
    650: ("Mozambique", "MZ"),
    654: ("Mauritania", "MR"),
    655: ("Malawi", "MW"),
    656: ("Niger", "NE"),
    657: ("Nigeria", "NG"),
    659: ("Namibia", "NA"),
    660: ("Reunion", "RE"),
    661: ("Rwanda", "RW"),
    662: ("Sudan", "SD"),
    663: ("Senegal", "SN"),
    664: ("Seychelles", "SC"),
    665: ("Saint Helena", "SH"),
    666: ("Somalia", "SO"),
    667: ("Sierra Leone", "SL"),
    668: ("Sao Tome and Principe", "ST"),
    669: ("Eswatini", "SZ"),
    670: ("Chad", "TD"),
    671: ("Togo", "TG"),
    672: ("Tunisia", "TN"),
    674: ("Tanzania", "TZ"),
    675: ("Uganda", "UG"),
    676: ("Congo, Democratic Republic of the", "CD"),
    677: ("Tanzania", "TZ"),
    678: ("Zambia", "ZM"),
    679: ("Zimbabwe", "ZW"),
    701: ("Argentina", "AR"),
    710: ("Brazil", "BR"),
    720: ("Bolivia", "BO"),
    725: ("Chile", "CL"),
    730: ("Colombia", "CO"),
    735: ("Ecuador", "EC"),
    740: ("Falkland Islands", "FK"),
    745: ("Guiana", "GF"),
    750: ("Guyana", "GY"),
    755: ("Paraguay", "PY"),
    760: ("Peru", "PE"),
    765: ("Suriname", "SR"),
    770: ("Uruguay", "UY"),
    775: ("Venezuela", "VE"),
    }


def mid_of(mmsi):
    "Extract the MID from an MMSI, or None if the station has no flag."
    digits = "%09d" % mmsi
    if digits.startswith("111"):
        mid = digits[3:6]
    elif digits.startswith("00"):
        mid = digits[2:5]
    elif digits.startswith("0"):
        mid = digits[1:4]
    elif digits.startswith("97"):
        return None
    elif digits.startswith("98") or digits.startswith("99"):
        mid = digits[2:5]
    else:
        mid = digits[:3]
    return int(mid)


def resolve_country(mmsi):
    "Map an MMSI to {'name': ..., 'code': ...}, or None if unknown."
    if mmsi is None or mmsi < 0:
        return None
    mid = mid_of(mmsi)
    if mid not in mid_table:
        return None
    (name, code) = mid_table[mid]
    return {"name": name, "code": code}

# End
