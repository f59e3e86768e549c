"""Account balance service: balances updated from balance events and served over HTTP."""